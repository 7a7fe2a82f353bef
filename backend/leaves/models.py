from django.conf import settings
from django.db import models

from academics.models import StudentProfile


class LeaveApplication(models.Model):
    class LeaveType(models.TextChoices):
        SICK = 'sick', 'Sick'
        PERSONAL = 'personal', 'Personal'
        EMERGENCY = 'emergency', 'Emergency'
        FAMILY = 'family', 'Family'
        MEDICAL = 'medical', 'Medical'
        ACADEMIC = 'academic', 'Academic'
        CASUAL = 'casual', 'Casual'

    class HalfDayPeriod(models.TextChoices):
        MORNING = 'morning', 'Morning'
        AFTERNOON = 'afternoon', 'Afternoon'

    class Priority(models.TextChoices):
        LOW = 'low', 'Low'
        MEDIUM = 'medium', 'Medium'
        HIGH = 'high', 'High'
        URGENT = 'urgent', 'Urgent'

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        APPROVED = 'approved', 'Approved'
        REJECTED = 'rejected', 'Rejected'
        CANCELLED = 'cancelled', 'Cancelled'

    applicant = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='leave_applications'
    )
    student = models.ForeignKey(
        StudentProfile,
        on_delete=models.CASCADE,
        related_name='leave_applications'
    )
    leave_type = models.CharField(max_length=16, choices=LeaveType.choices)
    reason = models.CharField(max_length=500)
    from_date = models.DateField()
    to_date = models.DateField()
    is_half_day = models.BooleanField(default=False)
    half_day_period = models.CharField(max_length=10, choices=HalfDayPeriod.choices, blank=True)
    # Fixed at submission; never recomputed
    total_days = models.FloatField()
    priority = models.CharField(max_length=8, choices=Priority.choices, default=Priority.MEDIUM)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING, db_index=True)
    reviewer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviewed_leave_applications'
    )
    review_comments = models.CharField(max_length=300, blank=True)
    review_date = models.DateTimeField(null=True, blank=True)
    applied_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('-applied_at',)
        verbose_name = 'Leave Application'
        verbose_name_plural = 'Leave Applications'
        indexes = [
            models.Index(fields=['student', 'status'], name='leave_student_status_idx'),
            models.Index(fields=['from_date', 'to_date'], name='leave_dates_idx'),
        ]

    def __str__(self):
        return f"{self.student.roll_number} {self.leave_type} {self.from_date}..{self.to_date} ({self.status})"

    @property
    def is_terminal(self) -> bool:
        return self.status != self.Status.PENDING
