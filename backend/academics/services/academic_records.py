"""Storage-backed academic aggregates built on ``metrics``."""
import logging
from collections import OrderedDict

from django.db import transaction

from academics.models import AttendanceRecord, MarksRecord, StudentProfile
from academics.services import metrics

logger = logging.getLogger(__name__)


def _published_marks(student_id):
    return MarksRecord.objects.filter(student_id=student_id, is_published=True, is_deleted=False)


def term_gpa(student_id: int, semester: int, academic_year: str) -> float:
    rows = _published_marks(student_id).filter(semester=semester, academic_year=academic_year)
    return metrics.weighted_gpa(rows.values_list('credits', 'grade_points'))


def cumulative_gpa(student_id: int) -> float:
    return metrics.weighted_gpa(_published_marks(student_id).values_list('credits', 'grade_points'))


def term_breakdown(student_id: int):
    """Published-marks GPA per (academic_year, semester), oldest first."""
    terms = OrderedDict()
    rows = _published_marks(student_id).order_by('academic_year', 'semester').values_list(
        'academic_year', 'semester', 'credits', 'grade_points'
    )
    for academic_year, semester, credits, points in rows:
        terms.setdefault((academic_year, semester), []).append((credits, points))
    return [
        {
            'academic_year': academic_year,
            'semester': semester,
            'gpa': metrics.weighted_gpa(pairs),
            'credits': sum(c for c, _ in pairs),
        }
        for (academic_year, semester), pairs in terms.items()
    ]


def refresh_student_aggregates(student_id: int) -> StudentProfile:
    """Recompute and persist the student's cumulative GPA and credit total.

    Must be called inside the transaction that changed the student's marks so
    the stored aggregate and the marks rows are committed together.
    """
    with transaction.atomic():
        profile = StudentProfile.objects.select_for_update().get(pk=student_id)
        pairs = list(_published_marks(student_id).values_list('credits', 'grade_points'))
        profile.cumulative_gpa = metrics.weighted_gpa(pairs)
        profile.total_credits = sum(credits for credits, _ in pairs)
        profile.save(update_fields=['cumulative_gpa', 'total_credits', 'updated_at'])
    logger.debug('Refreshed aggregates for student %s: gpa=%.3f credits=%s',
                 student_id, profile.cumulative_gpa, profile.total_credits)
    return profile


def attendance_percentage(student_id: int, faculty_id=None, subject=None, academic_year=None) -> float:
    qs = AttendanceRecord.objects.filter(student_id=student_id, is_deleted=False)
    if faculty_id is not None:
        qs = qs.filter(faculty_id=faculty_id)
    if subject:
        qs = qs.filter(subject=subject)
    if academic_year:
        qs = qs.filter(academic_year=academic_year)
    return metrics.attendance_percentage(qs.values_list('status', flat=True))


def attendance_summary(queryset):
    """Per-student totals for an already scoped attendance queryset."""
    per_student = OrderedDict()
    rows = queryset.filter(is_deleted=False).order_by('student_id').values_list(
        'student_id', 'student__roll_number', 'status'
    )
    for student_id, roll_number, status in rows:
        entry = per_student.setdefault(student_id, {'roll_number': roll_number, 'statuses': []})
        entry['statuses'].append(status)

    summary = []
    for student_id, entry in per_student.items():
        statuses = entry['statuses']
        summary.append({
            'student': student_id,
            'roll_number': entry['roll_number'],
            'total': len(statuses),
            'attended': sum(1 for s in statuses if s in metrics.ATTENDED_STATUSES),
            'percentage': metrics.attendance_percentage(statuses),
        })
    return summary
