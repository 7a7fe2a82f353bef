"""Marks writes.

Every write re-derives the record's percentage and grade (``MarksRecord.save``)
and refreshes the student's stored GPA inside the same transaction.
"""
import logging
from typing import Iterable, List

from django.db import IntegrityError, transaction
from django.utils import timezone

from academics.models import MarksRecord
from academics.services import academic_records, metrics
from academics.services.authoring import authoring_faculty, check_target
from academics.services.scope_resolver import ResourceKind, writable
from portal.exceptions import AccessDenied, ConflictError, NotFound, ValidationError

logger = logging.getLogger(__name__)

UPSERT_KEY = ('subject', 'exam_type', 'semester', 'academic_year')
UPDATABLE_FIELDS = ('subject_code', 'raw_score', 'max_score', 'credits', 'exam_date', 'remarks')


def upsert_marks(principal, entries: Iterable[dict], publish: bool = False) -> List[MarksRecord]:
    """Create or update one marks row per entry, all or nothing.

    Each entry carries ``student_id`` plus the upsert key and score fields.
    A second submission for the same student, faculty and key updates the
    existing row (and revives it if it had been deleted).
    """
    if principal.is_student:
        raise AccessDenied('students cannot write marks')

    records = []
    touched_students = set()
    with transaction.atomic():
        for entry in entries:
            student_id = entry['student_id']
            check_target(principal, ResourceKind.MARKS, student_id)
            faculty = authoring_faculty(principal, entry.get('faculty_id'))
            metrics.percentage(entry.get('raw_score'), entry.get('max_score'))

            defaults = {field: entry[field] for field in UPDATABLE_FIELDS if field in entry}
            defaults['is_deleted'] = False
            if publish:
                defaults['is_published'] = True
                defaults['published_at'] = timezone.now()

            lookup = {field: entry[field] for field in UPSERT_KEY}
            try:
                with transaction.atomic():
                    record, created = MarksRecord.objects.update_or_create(
                        student_id=student_id, faculty=faculty, defaults=defaults, **lookup
                    )
            except IntegrityError as exc:
                logger.warning('Marks upsert conflict for student %s %s', student_id, lookup)
                raise ConflictError() from exc

            logger.info('%s marks %s for student %s (%s %s)', 'Created' if created else 'Updated',
                        record.pk, student_id, record.subject, record.exam_type)
            records.append(record)
            touched_students.add(student_id)

        for student_id in touched_students:
            academic_records.refresh_student_aggregates(student_id)
    return records


def set_published(principal, record_ids, publish: bool = True) -> int:
    """Publish or unpublish marks; every id must be writable by the principal."""
    record_ids = {int(pk) for pk in record_ids}
    if not record_ids:
        raise ValidationError('record_ids', 'At least one record id is required.')

    with transaction.atomic():
        qs = writable(principal, ResourceKind.MARKS, MarksRecord.objects.filter(pk__in=record_ids, is_deleted=False))
        rows = list(qs.select_for_update())
        if len(rows) != len(record_ids):
            raise AccessDenied(f'marks {sorted(record_ids - {r.pk for r in rows})} not writable')

        published_at = timezone.now() if publish else None
        for record in rows:
            record.is_published = publish
            record.published_at = published_at
            record.save(update_fields=['is_published', 'published_at', 'updated_at'])

        for student_id in {r.student_id for r in rows}:
            academic_records.refresh_student_aggregates(student_id)

    logger.info('%s %d marks records', 'Published' if publish else 'Unpublished', len(rows))
    return len(rows)


def delete_marks(principal, record_id) -> MarksRecord:
    with transaction.atomic():
        qs = writable(principal, ResourceKind.MARKS, MarksRecord.objects.filter(is_deleted=False))
        record = qs.select_for_update().filter(pk=record_id).first()
        if record is None:
            raise NotFound()
        record.is_deleted = True
        record.save(update_fields=['is_deleted', 'updated_at'])
        academic_records.refresh_student_aggregates(record.student_id)
    logger.info('Deleted marks %s for student %s', record.pk, record.student_id)
    return record
