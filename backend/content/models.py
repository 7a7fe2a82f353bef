from django.db import models
from django.conf import settings
from django.utils import timezone

from academics.models import FacultyProfile


class TargetedContent(models.Model):
    """Fields shared by everything addressed to a group of students.

    A student matches when *any* of the target fields matches their profile;
    empty lists simply never match.
    """
    owner = models.ForeignKey(
        FacultyProfile,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(class)ss',
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    all_students = models.BooleanField(default=False)
    target_courses = models.JSONField(default=list, blank=True)
    target_semesters = models.JSONField(default=list, blank=True)
    target_departments = models.JSONField(default=list, blank=True)
    target_student_ids = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    expiry_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def is_expired(self, now=None):
        now = now or timezone.now()
        return self.expiry_date is not None and self.expiry_date < now


class Notice(TargetedContent):
    class Priority(models.TextChoices):
        LOW = 'low', 'Low'
        MEDIUM = 'medium', 'Medium'
        HIGH = 'high', 'High'
        URGENT = 'urgent', 'Urgent'

    class Category(models.TextChoices):
        GENERAL = 'general', 'General'
        ACADEMIC = 'academic', 'Academic'
        EXAM = 'exam', 'Exam'
        EVENT = 'event', 'Event'
        HOLIDAY = 'holiday', 'Holiday'
        ASSIGNMENT = 'assignment', 'Assignment'
        ANNOUNCEMENT = 'announcement', 'Announcement'

    title = models.CharField(max_length=200)
    content = models.TextField(max_length=2000)
    priority = models.CharField(max_length=8, choices=Priority.choices, default=Priority.MEDIUM)
    category = models.CharField(max_length=16, choices=Category.choices)
    is_draft = models.BooleanField(default=False)
    publish_date = models.DateTimeField(default=timezone.now)
    view_count = models.PositiveIntegerField(default=0)
    is_important = models.BooleanField(default=False)

    class Meta:
        ordering = ('-is_important', '-publish_date')
        indexes = [
            models.Index(fields=['is_active', 'is_draft', 'publish_date'], name='notice_live_idx'),
        ]

    def __str__(self):
        return self.title


class NoticeView(models.Model):
    """First view of a notice by a user; ``Notice.view_count`` counts these."""
    notice = models.ForeignKey(Notice, on_delete=models.CASCADE, related_name='views')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='+')
    viewed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['notice', 'user'], name='unique_notice_view'),
        ]


class Resource(TargetedContent):
    class ResourceType(models.TextChoices):
        LECTURE_NOTES = 'lecture_notes', 'Lecture notes'
        ASSIGNMENT = 'assignment', 'Assignment'
        REFERENCE_MATERIAL = 'reference_material', 'Reference material'
        SYLLABUS = 'syllabus', 'Syllabus'
        PREVIOUS_PAPERS = 'previous_papers', 'Previous papers'
        LAB_MANUAL = 'lab_manual', 'Lab manual'
        PRESENTATION = 'presentation', 'Presentation'
        VIDEO = 'video', 'Video'
        OTHER = 'other', 'Other'

    title = models.CharField(max_length=200)
    description = models.TextField(max_length=1000, blank=True)
    subject = models.CharField(max_length=100)
    subject_code = models.CharField(max_length=32, blank=True)
    resource_type = models.CharField(max_length=32, choices=ResourceType.choices, default=ResourceType.OTHER)
    file = models.FileField(upload_to='resources/%Y/%m/%d/')
    original_name = models.CharField(max_length=255, blank=True)
    file_size = models.PositiveBigIntegerField(default=0)
    mime_type = models.CharField(max_length=100, blank=True)
    is_public = models.BooleanField(default=False)
    semester = models.PositiveSmallIntegerField(null=True, blank=True)
    academic_year = models.CharField(max_length=9, blank=True)
    download_count = models.PositiveIntegerField(default=0)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('-uploaded_at',)

    def __str__(self):
        return self.title
