"""Fire-and-forget email notifications.

``send`` never raises: delivery problems are logged and reported through the
returned ``NotificationOutcome`` so the write that triggered a notification is
never blocked or rolled back by it.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict

from django.conf import settings
from django.core.mail import get_connection, send_mail
from django.db import transaction

logger = logging.getLogger(__name__)

STATUS_SUCCESS = 'SUCCESS'
STATUS_FAILED = 'FAILED'
STATUS_SKIPPED = 'SKIPPED'

REGISTRATION = 'registration'
REGISTRATION_APPROVED = 'registration_approved'
REGISTRATION_REJECTED = 'registration_rejected'
LEAVE_SUBMITTED = 'leave_submitted'
LEAVE_DECISION = 'leave_decision'
NOTICE_PUBLISHED = 'notice_published'

TEMPLATES = {
    REGISTRATION: (
        'Welcome to the Campus Portal',
        'Hello {name},\n\nYour account "{username}" has been created and is awaiting '
        'approval by an administrator.',
    ),
    REGISTRATION_APPROVED: (
        'Your Campus Portal registration was approved',
        'Hello {name},\n\nYour account "{username}" is now active. '
        'Sign in to complete your student profile.',
    ),
    REGISTRATION_REJECTED: (
        'Your Campus Portal registration was not approved',
        'Hello {name},\n\nYour registration for "{username}" was rejected.\n\nReason: {reason}',
    ),
    LEAVE_SUBMITTED: (
        'Leave application submitted',
        'Hello {name},\n\nYour {leave_type} leave request for {total_days} day(s) '
        'from {from_date} to {to_date} is pending review.',
    ),
    LEAVE_DECISION: (
        'Leave application {status}',
        'Hello {name},\n\nYour {leave_type} leave request from {from_date} to {to_date} '
        'was {status}.\n\nComments: {comments}',
    ),
    NOTICE_PUBLISHED: (
        '[Notice] {title}',
        '{content}',
    ),
}


@dataclass
class NotificationOutcome:
    status: str
    kind: str
    recipient: str = ''
    error: str = ''


class _Blank(dict):
    def __missing__(self, key):
        return ''


def _render(kind: str, payload: Dict[str, Any]):
    subject_tpl, body_tpl = TEMPLATES[kind]
    values = _Blank(payload)
    return subject_tpl.format_map(values), body_tpl.format_map(values)


def send(kind: str, payload: Dict[str, Any]) -> NotificationOutcome:
    """Deliver one notification of ``kind`` to ``payload['recipient']``."""
    recipient = str(payload.get('recipient') or '').strip()

    if not getattr(settings, 'PORTAL_NOTIFICATIONS_ENABLED', True):
        return NotificationOutcome(status=STATUS_SKIPPED, kind=kind, recipient=recipient, error='Notifications disabled')
    if kind not in TEMPLATES:
        logger.warning('Unknown notification kind %r', kind)
        return NotificationOutcome(status=STATUS_SKIPPED, kind=kind, recipient=recipient, error='Unknown kind')
    if not recipient:
        return NotificationOutcome(status=STATUS_SKIPPED, kind=kind, error='No recipient email configured')

    timeout = int(getattr(settings, 'PORTAL_NOTIFICATION_EMAIL_TIMEOUT', 10) or 10)
    try:
        subject, message = _render(kind, payload)
        connection = get_connection(timeout=timeout)
        sent_count = send_mail(
            subject=subject,
            message=message,
            from_email=getattr(settings, 'DEFAULT_FROM_EMAIL', None),
            recipient_list=[recipient],
            fail_silently=False,
            connection=connection,
        )
    except Exception as exc:
        logger.exception('Notification %s to %s failed', kind, recipient)
        return NotificationOutcome(status=STATUS_FAILED, kind=kind, recipient=recipient, error=str(exc))

    if int(sent_count or 0) <= 0:
        logger.warning('Notification %s to %s accepted but not delivered', kind, recipient)
        return NotificationOutcome(status=STATUS_FAILED, kind=kind, recipient=recipient, error='No recipients were delivered')

    logger.info('Notification %s sent to %s', kind, recipient)
    return NotificationOutcome(status=STATUS_SUCCESS, kind=kind, recipient=recipient)


def send_on_commit(kind: str, payload: Dict[str, Any]) -> None:
    """Queue ``send`` to run once the surrounding transaction commits."""
    transaction.on_commit(lambda: send(kind, dict(payload)))
