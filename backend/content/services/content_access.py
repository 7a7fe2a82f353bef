"""Read and write rules for notices and resources.

Admins see and manage everything. Faculty manage the items they own.
Students only ever read, and only what ``targeting`` lets them see.
"""
import logging
import mimetypes

from django.db import transaction
from django.db.models import F, Q

from academics.models import StudentProfile
from academics.services import profiles
from accounts.services import notifications
from content.models import Notice, NoticeView, Resource
from content.services import targeting
from portal.exceptions import AccessDenied, NotFound

logger = logging.getLogger(__name__)


def readable(principal, model):
    """Items the principal may list. Returns a queryset, or a list for students."""
    qs = model.objects.select_related('owner__user')
    if principal.is_admin:
        return qs
    if principal.is_faculty:
        faculty = profiles.get_or_create_faculty_profile(principal.id)
        if model is Resource:
            return qs.filter(Q(owner=faculty) | Q(is_public=True, is_active=True))
        return qs.filter(owner=faculty)
    student = profiles.get_or_create_student_profile(principal.id)
    return targeting.visible_to(student, qs)


def get_readable(principal, model, pk):
    item = model.objects.select_related('owner__user').filter(pk=pk).first()
    if item is None:
        raise NotFound()
    if principal.is_admin:
        return item
    if principal.is_faculty:
        faculty = profiles.get_or_create_faculty_profile(principal.id)
        if item.owner_id == faculty.pk:
            return item
        if model is Resource and item.is_public and item.is_active:
            return item
        raise AccessDenied(f'{model.__name__} {pk} is not owned by faculty {faculty.pk}')
    student = profiles.get_or_create_student_profile(principal.id)
    if not targeting.is_visible_to(student, item):
        raise AccessDenied(f'{model.__name__} {pk} is not targeted at student {student.pk}')
    return item


def get_writable(principal, model, pk):
    if principal.is_student:
        raise AccessDenied(f'students cannot modify {model.__name__}')
    item = model.objects.filter(pk=pk).first()
    if item is None:
        raise NotFound()
    if principal.is_faculty:
        faculty = profiles.get_or_create_faculty_profile(principal.id)
        if item.owner_id != faculty.pk:
            raise AccessDenied(f'{model.__name__} {pk} is not owned by faculty {faculty.pk}')
    return item


def owner_for(principal):
    """Faculty own what they create; admin-authored items have no faculty owner."""
    if principal.is_faculty:
        return profiles.get_or_create_faculty_profile(principal.id)
    if principal.is_admin:
        return None
    raise AccessDenied('students cannot publish content')


def record_notice_view(notice, user) -> bool:
    """Count the first view of ``notice`` by ``user``; later views are ignored."""
    with transaction.atomic():
        _, created = NoticeView.objects.get_or_create(notice=notice, user=user)
        if created:
            Notice.objects.filter(pk=notice.pk).update(view_count=F('view_count') + 1)
    return created


def record_download(resource) -> None:
    Resource.objects.filter(pk=resource.pk).update(download_count=F('download_count') + 1)


def describe_upload(upload) -> dict:
    name = getattr(upload, 'name', '') or ''
    mime_type = getattr(upload, 'content_type', None) or mimetypes.guess_type(name)[0] or 'application/octet-stream'
    return {
        'original_name': name[:255],
        'file_size': getattr(upload, 'size', 0) or 0,
        'mime_type': mime_type[:100],
    }


def announce_notice(notice) -> int:
    """Email the targeted students about an important, live notice.

    Returns the number of notifications queued.
    """
    if not notice.is_important or not targeting.is_live(notice):
        return 0
    students = StudentProfile.objects.filter(is_active=True).select_related('user')
    queued = 0
    for student in targeting.audience(notice, students):
        if not student.user.email:
            continue
        notifications.send_on_commit(notifications.NOTICE_PUBLISHED, {
            'recipient': student.user.email,
            'name': student.user.get_full_name() or student.user.username,
            'title': notice.title,
            'content': notice.content,
        })
        queued += 1
    logger.info('Queued %d notice notifications for notice %s', queued, notice.pk)
    return queued
