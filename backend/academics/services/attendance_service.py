import logging
from typing import Iterable, List

from django.db import transaction

from academics.models import AttendanceRecord
from academics.services.authoring import authoring_faculty, check_target
from academics.services.scope_resolver import ResourceKind, writable
from portal.exceptions import AccessDenied, NotFound

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('status', 'remarks', 'class_type', 'duration_minutes', 'subject', 'subject_code', 'date')
ENTRY_FIELDS = EDITABLE_FIELDS + ('semester', 'academic_year')


def mark_attendance(principal, entries: Iterable[dict]) -> List[AttendanceRecord]:
    """Write one attendance row per entry; a multi-entry call is a bulk marking."""
    if principal.is_student:
        raise AccessDenied('students cannot mark attendance')

    entries = list(entries)
    source = AttendanceRecord.Source.BULK if len(entries) > 1 else AttendanceRecord.Source.MANUAL
    created = []
    with transaction.atomic():
        for entry in entries:
            student_id = entry['student_id']
            check_target(principal, ResourceKind.ATTENDANCE, student_id)
            faculty = authoring_faculty(principal, entry.get('faculty_id'))
            record = AttendanceRecord(
                student_id=student_id,
                faculty=faculty,
                marking_source=source,
                **{field: entry[field] for field in ENTRY_FIELDS if field in entry},
            )
            record.full_clean()
            record.save()
            created.append(record)

    logger.info('Marked %d attendance rows (%s)', len(created), source)
    return created


def update_attendance(principal, record_id, changes: dict) -> AttendanceRecord:
    with transaction.atomic():
        qs = writable(principal, ResourceKind.ATTENDANCE, AttendanceRecord.objects.filter(is_deleted=False))
        record = qs.select_for_update().filter(pk=record_id).first()
        if record is None:
            raise NotFound()
        for field in EDITABLE_FIELDS:
            if field in changes:
                setattr(record, field, changes[field])
        record.full_clean()
        record.save()
    logger.info('Updated attendance %s', record.pk)
    return record


def delete_attendance(principal, record_id) -> AttendanceRecord:
    with transaction.atomic():
        qs = writable(principal, ResourceKind.ATTENDANCE, AttendanceRecord.objects.filter(is_deleted=False))
        record = qs.select_for_update().filter(pk=record_id).first()
        if record is None:
            raise NotFound()
        record.is_deleted = True
        record.save(update_fields=['is_deleted', 'updated_at'])
    logger.info('Deleted attendance %s', record.pk)
    return record
