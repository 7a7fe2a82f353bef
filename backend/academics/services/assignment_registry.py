"""Faculty-student assignment relation.

Rows in ``FacultyStudentAssignment`` are the only thing that grants a faculty
member visibility of a student. Removing a row never touches attendance or
marks already written.
"""
import logging
from typing import Optional, Set

from django.db import transaction

from academics.models import FacultyProfile, FacultyStudentAssignment, StudentProfile
from portal.exceptions import NotFound

logger = logging.getLogger(__name__)


def assign(faculty_id: int, student_id: int, assigned_by=None):
    """Add ``student_id`` to the faculty member's set. Idempotent.

    Returns ``(assignment, created)``.
    """
    if not FacultyProfile.objects.filter(pk=faculty_id).exists():
        raise NotFound()
    if not StudentProfile.objects.filter(pk=student_id).exists():
        raise NotFound()

    with transaction.atomic():
        assignment, created = FacultyStudentAssignment.objects.get_or_create(
            faculty_id=faculty_id,
            student_id=student_id,
            defaults={'assigned_by': assigned_by},
        )
    if created:
        logger.info('Assigned student %s to faculty %s', student_id, faculty_id)
    return assignment, created


def unassign(faculty_id: int, student_id: int) -> bool:
    """Remove the pair; returns False when it was not assigned."""
    deleted, _ = FacultyStudentAssignment.objects.filter(faculty_id=faculty_id, student_id=student_id).delete()
    if deleted:
        logger.info('Unassigned student %s from faculty %s', student_id, faculty_id)
    return bool(deleted)


def is_assigned(faculty_id: Optional[int], student_id: Optional[int]) -> bool:
    if faculty_id is None or student_id is None:
        return False
    return FacultyStudentAssignment.objects.filter(faculty_id=faculty_id, student_id=student_id).exists()


def assigned_student_ids(faculty_id: int) -> Set[int]:
    return set(
        FacultyStudentAssignment.objects.filter(faculty_id=faculty_id).values_list('student_id', flat=True)
    )


def faculty_for_student(student_id: int) -> Set[int]:
    return set(
        FacultyStudentAssignment.objects.filter(student_id=student_id).values_list('faculty_id', flat=True)
    )
