from django.conf import settings
from django.db import models
from django.contrib.auth.models import AbstractUser, UserManager
from django.core.validators import RegexValidator


class UsernameValidator(RegexValidator):
    """Custom validator that allows spaces in usernames."""
    regex = r'^[\w\s.@+-]+$'
    message = 'Enter a valid username. This value may contain letters, numbers, spaces, and @/./+/-/_ characters.'
    flags = 0


class PortalUserManager(UserManager):
    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault('role', User.Role.ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)


class User(AbstractUser):
    """
    Base user model.
    Every administrator, faculty member and student is a user with exactly
    one fixed role. Academic details live on the role's profile
    (academics.StudentProfile / academics.FacultyProfile).
    """

    class Role(models.TextChoices):
        ADMIN = 'admin', 'Administrator'
        FACULTY = 'faculty', 'Faculty'
        STUDENT = 'student', 'Student'

    class RegistrationStatus(models.TextChoices):
        PENDING = 'pending', 'Pending'
        APPROVED = 'approved', 'Approved'
        REJECTED = 'rejected', 'Rejected'

    username = models.CharField(
        max_length=150,
        unique=True,
        help_text='Required. 150 characters or fewer. Letters, numbers, spaces, and @/./+/-/_ characters.',
        validators=[UsernameValidator()],
        error_messages={
            'unique': 'A user with that username already exists.',
        },
    )
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.STUDENT, db_index=True)
    mobile_no = models.CharField(
        'Mobile no',
        max_length=32,
        blank=True,
        default='',
        help_text='Optional mobile number (leave empty if unknown).',
    )
    # self-registered students wait for an admin; accounts created by staff start approved
    registration_status = models.CharField(
        max_length=16,
        choices=RegistrationStatus.choices,
        default=RegistrationStatus.APPROVED,
        db_index=True,
    )
    registration_reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='+',
    )
    registration_reviewed_at = models.DateTimeField(null=True, blank=True)
    registration_note = models.CharField(max_length=500, blank=True, default='')

    objects = PortalUserManager()

    def __str__(self):
        return self.username

    @property
    def is_admin_role(self) -> bool:
        return self.is_superuser or self.role == self.Role.ADMIN
