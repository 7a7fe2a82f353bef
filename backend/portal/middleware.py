import logging
import time
from typing import Callable

from django.conf import settings
from django.http import HttpRequest, HttpResponse

from accounts.principal import Principal

logger = logging.getLogger('portal.requests')


def _principal_label(request: HttpRequest) -> str:
    # DRF copies the JWT user back onto the Django request once the view authenticates
    user = getattr(request, 'user', None)
    if user is None or not getattr(user, 'is_authenticated', False):
        return 'anonymous'
    principal = Principal.from_user(user)
    return f'{principal.role}:{principal.id}'


def _route_name(request: HttpRequest) -> str:
    match = getattr(request, 'resolver_match', None)
    if match is None or not match.view_name:
        return request.path
    return match.view_name


class ApiTimingMiddleware:
    """Times ``/api/`` requests.

    Every timed response carries a ``Server-Timing`` header. Requests slower
    than ``SLOW_REQUEST_LOG_MS`` are logged with their route name and the
    principal as ``role:id``, never the username.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest):
        enabled = bool(getattr(settings, 'SLOW_REQUEST_LOG_ENABLED', True))
        prefix = getattr(settings, 'API_TIMING_PATH_PREFIX', '/api/')
        if not enabled or not request.path.startswith(prefix):
            return self.get_response(request)

        threshold_ms = int(getattr(settings, 'SLOW_REQUEST_LOG_MS', 1200))
        started = time.perf_counter()
        response = self.get_response(request)
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        response['Server-Timing'] = f'app;dur={elapsed_ms:.1f}'

        if elapsed_ms >= threshold_ms:
            logger.warning(
                'SLOW_REQUEST method=%s route=%s status=%s duration_ms=%.2f principal=%s',
                request.method,
                _route_name(request),
                response.status_code,
                elapsed_ms,
                _principal_label(request),
            )
        return response
