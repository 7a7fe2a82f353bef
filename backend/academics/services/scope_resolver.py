"""Decide which student-owned rows a principal may see or act on.

Every read of attendance, marks, leave or profile data asks ``resolve_scope``
for a filter and applies it to the queryset before it is evaluated:

    scope = resolve_scope(principal, ResourceKind.MARKS)
    qs = scope.apply(MarksRecord.objects.all(), author_field='faculty')

Admins are unrestricted, students see only their own profile's rows and
faculty see the rows of their currently assigned students. For attendance
and marks a faculty member additionally keeps the rows they authored, so
unassigning a student never hides that faculty member's own history.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional

from django.db.models import Q

from academics.services import assignment_registry, profiles
from portal.exceptions import AccessDenied

logger = logging.getLogger(__name__)


class ResourceKind(str, Enum):
    ATTENDANCE = 'attendance'
    MARKS = 'marks'
    LEAVE = 'leave'
    ROSTER = 'roster'
    PROFILE = 'profile'


AUTHORED_KINDS = frozenset({ResourceKind.ATTENDANCE, ResourceKind.MARKS})


@dataclass(frozen=True)
class Unrestricted:
    def apply(self, queryset, student_field='student', author_field=None):
        return queryset

    def permits(self, student_id, author_id=None) -> bool:
        return True


@dataclass(frozen=True)
class OwnerOnly:
    student_id: int

    def apply(self, queryset, student_field='student', author_field=None):
        return queryset.filter(**{student_field: self.student_id})

    def permits(self, student_id, author_id=None) -> bool:
        return student_id is not None and int(student_id) == self.student_id


@dataclass(frozen=True)
class MemberOf:
    student_ids: FrozenSet[int]
    faculty_id: int
    # Set only for kinds where authored rows stay visible after unassignment
    author_id: Optional[int] = None

    def apply(self, queryset, student_field='student', author_field=None):
        condition = Q(**{f'{student_field}__in': list(self.student_ids)})
        if author_field and self.author_id is not None:
            condition |= Q(**{author_field: self.author_id})
        return queryset.filter(condition)

    def permits(self, student_id, author_id=None) -> bool:
        if student_id is not None and int(student_id) in self.student_ids:
            return True
        return self.author_id is not None and author_id is not None and int(author_id) == self.author_id


UNRESTRICTED = Unrestricted()


def resolve_scope(principal, resource_kind, target_id=None):
    """Return the scope filter for ``principal`` on ``resource_kind``.

    When ``target_id`` (a student profile id) is given, raises ``AccessDenied``
    unless the principal may act on that student right now.
    """
    kind = ResourceKind(resource_kind)

    if principal.is_admin:
        return UNRESTRICTED

    if principal.is_student:
        own = profiles.get_or_create_student_profile(principal.id)
        if target_id is not None and int(target_id) != own.pk:
            raise AccessDenied(f'student {own.pk} requested {kind.value} of student {target_id}')
        return OwnerOnly(own.pk)

    if principal.is_faculty:
        faculty = profiles.get_or_create_faculty_profile(principal.id)
        student_ids = frozenset(assignment_registry.assigned_student_ids(faculty.pk))
        if target_id is not None and int(target_id) not in student_ids:
            raise AccessDenied(f'student {target_id} is not assigned to faculty {faculty.pk}')
        author_id = faculty.pk if kind in AUTHORED_KINDS else None
        return MemberOf(student_ids=student_ids, faculty_id=faculty.pk, author_id=author_id)

    logger.warning('Principal %s has unknown role %r', principal.id, principal.role)
    raise AccessDenied(f'unknown role {principal.role!r}')


def writable(principal, resource_kind, queryset, student_field='student', author_field='faculty'):
    """Narrow ``queryset`` to authored rows the principal may still change.

    Faculty may change only rows they authored for students currently
    assigned to them; students never write attendance or marks.
    """
    if principal.is_student:
        raise AccessDenied(f'students cannot modify {ResourceKind(resource_kind).value}')
    scope = resolve_scope(principal, resource_kind)
    if isinstance(scope, Unrestricted):
        return queryset
    return queryset.filter(**{
        f'{student_field}__in': list(scope.student_ids),
        author_field: scope.faculty_id,
    })
