"""Leave application lifecycle.

    pending -> approved | rejected | cancelled

Every transition starts from ``pending`` and every target state is terminal.
Transitions lock the row, check who is acting, then check the current state,
so an unauthorized caller always gets ``AccessDenied`` no matter what state
the application is in. Notifications go out only after the transaction
commits and never affect the outcome.
"""
import datetime
import logging
from collections import OrderedDict

from django.db import transaction
from django.db.models import Count, Sum
from django.utils import timezone

from academics.services import profiles
from academics.services.scope_resolver import ResourceKind, resolve_scope
from accounts.services import notifications
from leaves.models import LeaveApplication
from portal.exceptions import AccessDenied, InvalidStateTransition, NotFound, ValidationError

logger = logging.getLogger(__name__)

Status = LeaveApplication.Status

ACADEMIC_YEAR_START = (7, 1)
ACADEMIC_YEAR_END = (6, 30)


def leave_days(from_date, to_date, is_half_day=False) -> float:
    """Inclusive day count, or 0.5 for a half-day leave."""
    if from_date > to_date:
        raise ValidationError('from_date', 'From date cannot be after to date.')
    if is_half_day:
        return 0.5
    return float((to_date - from_date).days + 1)


def _log(event: str, application: LeaveApplication, actor_id, reason: str = ''):
    payload = {
        'event': event,
        'leave_id': application.id,
        'student_id': application.student_id,
        'status': application.status,
        'actor_id': actor_id,
        'reason': reason,
    }
    logger.info('%s', payload)


def _notify(kind: str, application: LeaveApplication, **extra):
    applicant = application.applicant
    payload = {
        'recipient': applicant.email,
        'name': applicant.get_full_name() or applicant.username,
        'leave_type': application.get_leave_type_display(),
        'from_date': application.from_date.isoformat(),
        'to_date': application.to_date.isoformat(),
        'total_days': application.total_days,
        'status': application.status,
    }
    payload.update(extra)
    notifications.send_on_commit(kind, payload)


def scoped_leaves(principal):
    """Leave applications visible to ``principal``, as an unevaluated queryset."""
    scope = resolve_scope(principal, ResourceKind.LEAVE)
    qs = LeaveApplication.objects.select_related('student', 'applicant', 'reviewer')
    return scope.apply(qs)


def submit_leave(principal, leave_type, reason, from_date, to_date,
                 is_half_day=False, half_day_period='', priority=LeaveApplication.Priority.MEDIUM):
    if not principal.is_student:
        raise AccessDenied(f'role {principal.role} cannot apply for leave')
    if leave_type not in LeaveApplication.LeaveType.values:
        raise ValidationError('leave_type', f'"{leave_type}" is not a valid choice.')
    if not reason or not str(reason).strip():
        raise ValidationError('reason', 'This field may not be blank.')
    if len(reason) > 500:
        raise ValidationError('reason', 'Ensure this field has no more than 500 characters.')
    if is_half_day and half_day_period not in LeaveApplication.HalfDayPeriod.values:
        raise ValidationError('half_day_period', 'Required for a half-day leave (morning or afternoon).')
    if is_half_day and from_date != to_date:
        raise ValidationError('to_date', 'A half-day leave must start and end on the same date.')
    if priority not in LeaveApplication.Priority.values:
        raise ValidationError('priority', f'"{priority}" is not a valid choice.')

    total_days = leave_days(from_date, to_date, is_half_day)
    student = profiles.get_or_create_student_profile(principal.id)

    with transaction.atomic():
        application = LeaveApplication.objects.create(
            applicant_id=principal.id,
            student=student,
            leave_type=leave_type,
            reason=str(reason).strip(),
            from_date=from_date,
            to_date=to_date,
            is_half_day=bool(is_half_day),
            half_day_period=half_day_period if is_half_day else '',
            total_days=total_days,
            priority=priority,
        )
        _log('leave_submitted', application, principal.id)
        _notify(notifications.LEAVE_SUBMITTED, application)
    return application


def _lock(application):
    pk = getattr(application, 'pk', application)
    locked = LeaveApplication.objects.select_for_update().select_related('applicant').filter(pk=pk).first()
    if locked is None:
        raise NotFound()
    return locked


def _check_reviewer(principal, application):
    if principal.is_admin:
        return
    if principal.is_faculty:
        # raises AccessDenied unless the applicant is currently assigned
        resolve_scope(principal, ResourceKind.LEAVE, target_id=application.student_id)
        return
    raise AccessDenied(f'role {principal.role} cannot review leave {application.pk}')


def _require_pending(application, to_state):
    if application.status != Status.PENDING:
        raise InvalidStateTransition(application.status, to_state)


def _decide(application, principal, to_state, comments=''):
    comments = (comments or '').strip()
    if len(comments) > 300:
        raise ValidationError('review_comments', 'Ensure this field has no more than 300 characters.')

    with transaction.atomic():
        locked = _lock(application)
        _check_reviewer(principal, locked)
        _require_pending(locked, to_state)

        locked.status = to_state
        locked.reviewer_id = principal.id
        locked.review_date = timezone.now()
        locked.review_comments = comments
        locked.save(update_fields=['status', 'reviewer', 'review_date', 'review_comments', 'updated_at'])
        _log(f'leave_{to_state}', locked, principal.id, comments)
        _notify(notifications.LEAVE_DECISION, locked, comments=comments or '-')
    return locked


def approve_leave(application, principal, comments=''):
    return _decide(application, principal, Status.APPROVED, comments)


def reject_leave(application, principal, comments=''):
    return _decide(application, principal, Status.REJECTED, comments)


def cancel_leave(application, principal):
    """Withdraw a pending application; only the student who applied may do this."""
    with transaction.atomic():
        locked = _lock(application)
        if not principal.is_student or locked.applicant_id != principal.id:
            raise AccessDenied(f'user {principal.id} did not apply for leave {locked.pk}')
        _require_pending(locked, Status.CANCELLED)

        locked.status = Status.CANCELLED
        locked.save(update_fields=['status', 'updated_at'])
        _log('leave_cancelled', locked, principal.id)
    return locked


def academic_year_bounds(academic_year: str):
    """``'2024-2025'`` -> (2024-07-01, 2025-06-30)."""
    try:
        start_year, end_year = (int(part) for part in academic_year.split('-'))
    except (AttributeError, ValueError):
        raise ValidationError('academic_year', 'Academic year must be in format YYYY-YYYY (e.g., 2024-2025)')
    if end_year != start_year + 1:
        raise ValidationError('academic_year', 'Academic year must span two consecutive years.')
    return (
        datetime.date(start_year, *ACADEMIC_YEAR_START),
        datetime.date(end_year, *ACADEMIC_YEAR_END),
    )


def current_academic_year(today=None) -> str:
    today = today or timezone.localdate()
    start = today.year if (today.month, today.day) >= ACADEMIC_YEAR_START else today.year - 1
    return f'{start}-{start + 1}'


def leave_stats(student_id: int, academic_year: str) -> dict:
    """Approved leave taken in ``academic_year``, per leave type and in total.

    A leave belongs to the academic year its ``from_date`` falls in.
    """
    start, end = academic_year_bounds(academic_year)
    rows = (
        LeaveApplication.objects
        .filter(student_id=student_id, status=Status.APPROVED, from_date__gte=start, from_date__lte=end)
        .values('leave_type')
        .annotate(total_days=Sum('total_days'), count=Count('id'))
        .order_by('leave_type')
    )
    by_type = OrderedDict()
    total = 0.0
    for row in rows:
        days = float(row['total_days'] or 0)
        by_type[row['leave_type']] = {'total_days': days, 'count': row['count']}
        total += days
    return {
        'student': student_id,
        'academic_year': academic_year,
        'by_type': by_type,
        'total_approved_days': total,
    }
