"""Who a new attendance or marks row is written under, and for whom."""
from academics.models import FacultyProfile, StudentProfile
from academics.services import profiles
from academics.services.scope_resolver import resolve_scope
from portal.exceptions import AccessDenied, NotFound, ValidationError


def authoring_faculty(principal, faculty_id=None) -> FacultyProfile:
    """Faculty always write as themselves; admins must name the faculty member."""
    if principal.is_faculty:
        return profiles.get_or_create_faculty_profile(principal.id)
    if principal.is_admin:
        if not faculty_id:
            raise ValidationError('faculty', 'This field is required when writing as an administrator.')
        try:
            return FacultyProfile.objects.get(pk=faculty_id)
        except FacultyProfile.DoesNotExist:
            raise NotFound()
    raise AccessDenied(f'role {principal.role} cannot author academic records')


def check_target(principal, resource_kind, student_id) -> None:
    """Raise unless ``student_id`` exists and is currently writable by the principal."""
    resolve_scope(principal, resource_kind, target_id=student_id)
    if not StudentProfile.objects.filter(pk=student_id).exists():
        raise NotFound()
