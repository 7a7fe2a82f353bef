"""Lazy, idempotent profile creation for student and faculty principals."""
import logging
import secrets

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone

from academics.models import StudentProfile, FacultyProfile, NOT_ASSIGNED, MIN_SEMESTER
from portal.exceptions import AccessDenied, ConflictError

logger = logging.getLogger(__name__)


def placeholder_roll_number(user_id: int, year: int) -> str:
    return f"{year}CUK{user_id:05d}"


def placeholder_employee_code(user_id: int) -> str:
    return f"FAC{user_id}"


def _get_or_create(model, user_id: int, code_field: str, defaults: dict):
    """``get_or_create`` keyed on the user.

    ``get_or_create`` already resolves a concurrent insert for the same user.
    An IntegrityError escaping it means another profile already holds the
    placeholder code; retry once with a random suffix.
    """
    try:
        return model.objects.get_or_create(user_id=user_id, defaults=defaults)
    except IntegrityError:
        existing = model.objects.filter(user_id=user_id).first()
        if existing is not None:
            return existing, False
        taken = defaults[code_field]
        defaults = dict(defaults, **{code_field: f"{taken}-{secrets.token_hex(3).upper()}"})
        logger.warning('Placeholder %s %s is taken; using %s for user %s',
                       code_field, taken, defaults[code_field], user_id)
        return model.objects.get_or_create(user_id=user_id, defaults=defaults)


def get_or_create_student_profile(user_id: int) -> StudentProfile:
    year = timezone.now().year
    profile, created = _get_or_create(StudentProfile, user_id, 'roll_number', {
        'roll_number': placeholder_roll_number(user_id, year),
        'course': NOT_ASSIGNED,
        'department': NOT_ASSIGNED,
        'semester': MIN_SEMESTER,
        'enrollment_year': year,
    })
    if created:
        logger.info('Created placeholder student profile %s for user %s', profile.pk, user_id)
    return profile


def get_or_create_faculty_profile(user_id: int) -> FacultyProfile:
    profile, created = _get_or_create(FacultyProfile, user_id, 'employee_code', {
        'employee_code': placeholder_employee_code(user_id),
        'department': NOT_ASSIGNED,
        'designation': FacultyProfile.Designation.LECTURER,
    })
    if created:
        logger.info('Created placeholder faculty profile %s for user %s', profile.pk, user_id)
    return profile


def create_faculty_account(username, password, email='', first_name='', last_name='', employee_code='',
                           department=NOT_ASSIGNED, designation=FacultyProfile.Designation.LECTURER,
                           created_by=None) -> FacultyProfile:
    """Create a faculty user and their profile together.

    Without an ``employee_code`` the placeholder code is used.
    """
    User = get_user_model()
    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=username,
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
                role=User.Role.FACULTY,
            )
            profile = FacultyProfile.objects.create(
                user=user,
                employee_code=employee_code or placeholder_employee_code(user.pk),
                department=department,
                designation=designation,
            )
    except IntegrityError as exc:
        logger.warning('Faculty account %s conflicts with an existing user or employee code', username)
        raise ConflictError() from exc
    logger.info('Faculty account %s (profile %s) created by %s', user.pk, profile.pk, created_by)
    return profile


def profile_for(principal):
    """Return the principal's own profile, creating it on first access.

    Admins have no profile; asking for one is an authorization failure.
    """
    if principal.is_student:
        return get_or_create_student_profile(principal.id)
    if principal.is_faculty:
        return get_or_create_faculty_profile(principal.id)
    raise AccessDenied(f'role {principal.role} has no profile')
