from portal.exceptions import ValidationError


def int_param(request, name, default=None):
    """Read an optional integer query parameter; malformed values are a 400."""
    raw = request.query_params.get(name)
    if raw in (None, ''):
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(name, 'A valid integer is required.')
