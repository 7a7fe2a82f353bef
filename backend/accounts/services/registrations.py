"""Admin review of self-registered student accounts.

A self-registered account starts ``pending`` and cannot obtain tokens until an
admin approves it. Approval and rejection are terminal.
"""
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count
from django.utils import timezone

from accounts.services import notifications
from portal.exceptions import AccessDenied, InvalidStateTransition, NotFound, ValidationError

logger = logging.getLogger(__name__)

User = get_user_model()
Status = User.RegistrationStatus

REJECTION_REASON_MIN = 10
REJECTION_REASON_MAX = 500


def self_registrations(status=Status.PENDING):
    return User.objects.filter(role=User.Role.STUDENT, registration_status=status).order_by('date_joined')


def _lock_pending(principal, user_id, to_state):
    if not principal.is_admin:
        raise AccessDenied('only admins review registrations')
    user = User.objects.select_for_update().filter(pk=user_id).first()
    if user is None:
        raise NotFound()
    if user.registration_status != Status.PENDING:
        raise InvalidStateTransition(user.registration_status, to_state)
    return user


def _decide(user, principal, to_state, note=''):
    user.registration_status = to_state
    user.registration_reviewed_by_id = principal.id
    user.registration_reviewed_at = timezone.now()
    user.registration_note = note
    user.is_active = to_state == Status.APPROVED
    user.save(update_fields=[
        'registration_status', 'registration_reviewed_by', 'registration_reviewed_at',
        'registration_note', 'is_active',
    ])


def _payload(user, **extra):
    payload = {
        'recipient': user.email,
        'name': user.get_full_name() or user.username,
        'username': user.username,
    }
    payload.update(extra)
    return payload


def approve_registration(principal, user_id):
    with transaction.atomic():
        user = _lock_pending(principal, user_id, Status.APPROVED)
        _decide(user, principal, Status.APPROVED)
        notifications.send_on_commit(notifications.REGISTRATION_APPROVED, _payload(user))
    logger.info('Registration of user %s approved by %s', user.pk, principal.id)
    return user


def reject_registration(principal, user_id, reason):
    reason = (reason or '').strip()
    with transaction.atomic():
        user = _lock_pending(principal, user_id, Status.REJECTED)
        if not REJECTION_REASON_MIN <= len(reason) <= REJECTION_REASON_MAX:
            raise ValidationError(
                'reason', f'Must be between {REJECTION_REASON_MIN} and {REJECTION_REASON_MAX} characters.'
            )
        _decide(user, principal, Status.REJECTED, note=reason)
        notifications.send_on_commit(notifications.REGISTRATION_REJECTED, _payload(user, reason=reason))
    logger.info('Registration of user %s rejected by %s', user.pk, principal.id)
    return user


def registration_stats():
    """Self-registration counts per status."""
    counts = dict.fromkeys(Status.values, 0)
    rows = (
        User.objects.filter(role=User.Role.STUDENT)
        .values('registration_status')
        .annotate(n=Count('id'))
    )
    for row in rows:
        counts[row['registration_status']] = row['n']
    counts['total'] = sum(counts.values())
    return counts
