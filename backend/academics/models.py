from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator, RegexValidator

NOT_ASSIGNED = 'Not Assigned'
MIN_SEMESTER = 1
MAX_SEMESTER = 8

academic_year_validator = RegexValidator(
    regex=r'^\d{4}-\d{4}$',
    message='Academic year must be in format YYYY-YYYY (e.g., 2024-2025)',
)
semester_validators = [MinValueValidator(MIN_SEMESTER), MaxValueValidator(MAX_SEMESTER)]


class StudentProfile(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='student_profile'
    )
    roll_number = models.CharField(max_length=64, unique=True, db_index=True)
    course = models.CharField(max_length=128, default=NOT_ASSIGNED)
    semester = models.PositiveSmallIntegerField(default=MIN_SEMESTER, validators=semester_validators)
    department = models.CharField(max_length=128, default=NOT_ASSIGNED)
    enrollment_year = models.PositiveSmallIntegerField()
    # Derived from published marks; written only by academic_records.refresh_student_aggregates
    cumulative_gpa = models.FloatField(default=0.0)
    total_credits = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('roll_number',)

    def __str__(self):
        return f"Student {self.roll_number} ({self.user.username})"

    def save(self, *args, **kwargs):
        # Uniqueness is left to the database so concurrent get_or_create
        # surfaces as IntegrityError rather than a model ValidationError.
        self.full_clean(validate_unique=False)
        super().save(*args, **kwargs)


class FacultyProfile(models.Model):
    class Designation(models.TextChoices):
        PROFESSOR = 'Professor', 'Professor'
        ASSISTANT_PROFESSOR = 'Assistant Professor', 'Assistant Professor'
        LECTURER = 'Lecturer', 'Lecturer'
        GUEST_FACULTY = 'Guest Faculty', 'Guest Faculty'

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='faculty_profile'
    )
    employee_code = models.CharField(max_length=64, unique=True, db_index=True)
    department = models.CharField(max_length=128, default=NOT_ASSIGNED)
    designation = models.CharField(max_length=32, choices=Designation.choices, default=Designation.LECTURER)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Faculty {self.employee_code} ({self.user.username})"

    @property
    def assigned_student_ids(self):
        return set(self.student_assignments.values_list('student_id', flat=True))

    def save(self, *args, **kwargs):
        self.full_clean(validate_unique=False)
        super().save(*args, **kwargs)


class FacultyStudentAssignment(models.Model):
    """A faculty member is authorized to act on the assigned student.

    One row per pair; the set of rows for a faculty member is the sole source
    of faculty-scoped visibility.
    """
    faculty = models.ForeignKey(FacultyProfile, on_delete=models.CASCADE, related_name='student_assignments')
    student = models.ForeignKey(StudentProfile, on_delete=models.CASCADE, related_name='faculty_assignments')
    assigned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    assigned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Faculty Student Assignment'
        verbose_name_plural = 'Faculty Student Assignments'
        constraints = [
            models.UniqueConstraint(fields=['faculty', 'student'], name='unique_faculty_student_assignment'),
        ]

    def __str__(self):
        return f"{self.faculty.employee_code} -> {self.student.roll_number}"


class AttendanceRecord(models.Model):
    class Status(models.TextChoices):
        PRESENT = 'present', 'Present'
        ABSENT = 'absent', 'Absent'
        LATE = 'late', 'Late'
        EXCUSED = 'excused', 'Excused'

    class ClassType(models.TextChoices):
        LECTURE = 'lecture', 'Lecture'
        LAB = 'lab', 'Lab'
        TUTORIAL = 'tutorial', 'Tutorial'
        SEMINAR = 'seminar', 'Seminar'
        PRACTICAL = 'practical', 'Practical'

    class Source(models.TextChoices):
        MANUAL = 'manual', 'Manual'
        BULK = 'bulk', 'Bulk'

    student = models.ForeignKey(StudentProfile, on_delete=models.CASCADE, related_name='attendance_records')
    faculty = models.ForeignKey(FacultyProfile, on_delete=models.PROTECT, related_name='attendance_records')
    subject = models.CharField(max_length=100)
    subject_code = models.CharField(max_length=32)
    date = models.DateField()
    status = models.CharField(max_length=8, choices=Status.choices)
    semester = models.PositiveSmallIntegerField(validators=semester_validators)
    academic_year = models.CharField(max_length=9, validators=[academic_year_validator])
    class_type = models.CharField(max_length=16, choices=ClassType.choices, default=ClassType.LECTURE)
    duration_minutes = models.PositiveSmallIntegerField(
        default=60,
        validators=[MinValueValidator(15), MaxValueValidator(300)],
    )
    remarks = models.CharField(max_length=500, blank=True)
    marking_source = models.CharField(max_length=8, choices=Source.choices, default=Source.MANUAL)
    is_deleted = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('-date', '-created_at')
        indexes = [
            models.Index(fields=['student', 'academic_year', 'semester'], name='att_student_term_idx'),
            models.Index(fields=['faculty', 'subject', 'academic_year'], name='att_faculty_subject_idx'),
        ]

    def __str__(self):
        return f"{self.student.roll_number} {self.subject_code} {self.date} -> {self.status}"


class MarksRecord(models.Model):
    class ExamType(models.TextChoices):
        QUIZ = 'quiz', 'Quiz'
        ASSIGNMENT = 'assignment', 'Assignment'
        MIDTERM = 'midterm', 'Midterm'
        FINAL = 'final', 'Final'
        PRACTICAL = 'practical', 'Practical'
        PROJECT = 'project', 'Project'

    student = models.ForeignKey(StudentProfile, on_delete=models.CASCADE, related_name='marks_records')
    faculty = models.ForeignKey(FacultyProfile, on_delete=models.PROTECT, related_name='marks_records')
    subject = models.CharField(max_length=100)
    subject_code = models.CharField(max_length=32)
    exam_type = models.CharField(max_length=16, choices=ExamType.choices)
    raw_score = models.FloatField(validators=[MinValueValidator(0)])
    max_score = models.FloatField(validators=[MinValueValidator(0)])
    # Derived on every save from raw_score/max_score via academics.services.metrics
    percentage = models.FloatField(default=0.0)
    letter_grade = models.CharField(max_length=2, default='F')
    grade_points = models.PositiveSmallIntegerField(default=0)
    credits = models.PositiveSmallIntegerField(default=3, validators=[MinValueValidator(1), MaxValueValidator(10)])
    semester = models.PositiveSmallIntegerField(validators=semester_validators)
    academic_year = models.CharField(max_length=9, validators=[academic_year_validator])
    exam_date = models.DateField(null=True, blank=True)
    remarks = models.CharField(max_length=500, blank=True)
    is_published = models.BooleanField(default=False)
    published_at = models.DateTimeField(null=True, blank=True)
    is_deleted = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ('-updated_at',)
        constraints = [
            models.UniqueConstraint(
                fields=['student', 'faculty', 'subject', 'exam_type', 'semester', 'academic_year'],
                name='unique_marks_per_exam',
            ),
        ]
        indexes = [
            models.Index(fields=['student', 'is_published', 'is_deleted'], name='marks_student_visible_idx'),
        ]

    def __str__(self):
        return f"{self.student.roll_number} {self.subject_code} {self.exam_type}: {self.raw_score}/{self.max_score}"

    def derive_metrics(self):
        from academics.services import metrics

        pct = metrics.percentage(self.raw_score, self.max_score)
        grade = metrics.grade_for(pct)
        self.percentage = pct
        self.letter_grade = grade.letter
        self.grade_points = grade.points

    def save(self, *args, **kwargs):
        self.derive_metrics()
        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = set(update_fields) | {'percentage', 'letter_grade', 'grade_points'}
        super().save(*args, **kwargs)
