import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='StudentProfile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('roll_number', models.CharField(db_index=True, max_length=64, unique=True)),
                ('course', models.CharField(default='Not Assigned', max_length=128)),
                ('semester', models.PositiveSmallIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(8)])),
                ('department', models.CharField(default='Not Assigned', max_length=128)),
                ('enrollment_year', models.PositiveSmallIntegerField()),
                ('cumulative_gpa', models.FloatField(default=0.0)),
                ('total_credits', models.PositiveIntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='student_profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ('roll_number',),
            },
        ),
        migrations.CreateModel(
            name='FacultyProfile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('employee_code', models.CharField(db_index=True, max_length=64, unique=True)),
                ('department', models.CharField(default='Not Assigned', max_length=128)),
                ('designation', models.CharField(choices=[('Professor', 'Professor'), ('Assistant Professor', 'Assistant Professor'), ('Lecturer', 'Lecturer'), ('Guest Faculty', 'Guest Faculty')], default='Lecturer', max_length=32)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='faculty_profile', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='FacultyStudentAssignment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('assigned_at', models.DateTimeField(auto_now_add=True)),
                ('assigned_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('faculty', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='student_assignments', to='academics.facultyprofile')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='faculty_assignments', to='academics.studentprofile')),
            ],
            options={
                'verbose_name': 'Faculty Student Assignment',
                'verbose_name_plural': 'Faculty Student Assignments',
                'constraints': [models.UniqueConstraint(fields=('faculty', 'student'), name='unique_faculty_student_assignment')],
            },
        ),
        migrations.CreateModel(
            name='AttendanceRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('subject', models.CharField(max_length=100)),
                ('subject_code', models.CharField(max_length=32)),
                ('date', models.DateField()),
                ('status', models.CharField(choices=[('present', 'Present'), ('absent', 'Absent'), ('late', 'Late'), ('excused', 'Excused')], max_length=8)),
                ('semester', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(8)])),
                ('academic_year', models.CharField(max_length=9, validators=[django.core.validators.RegexValidator(message='Academic year must be in format YYYY-YYYY (e.g., 2024-2025)', regex='^\\d{4}-\\d{4}$')])),
                ('class_type', models.CharField(choices=[('lecture', 'Lecture'), ('lab', 'Lab'), ('tutorial', 'Tutorial'), ('seminar', 'Seminar'), ('practical', 'Practical')], default='lecture', max_length=16)),
                ('duration_minutes', models.PositiveSmallIntegerField(default=60, validators=[django.core.validators.MinValueValidator(15), django.core.validators.MaxValueValidator(300)])),
                ('remarks', models.CharField(blank=True, max_length=500)),
                ('marking_source', models.CharField(choices=[('manual', 'Manual'), ('bulk', 'Bulk')], default='manual', max_length=8)),
                ('is_deleted', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('faculty', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='attendance_records', to='academics.facultyprofile')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attendance_records', to='academics.studentprofile')),
            ],
            options={
                'ordering': ('-date', '-created_at'),
                'indexes': [
                    models.Index(fields=['student', 'academic_year', 'semester'], name='att_student_term_idx'),
                    models.Index(fields=['faculty', 'subject', 'academic_year'], name='att_faculty_subject_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='MarksRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('subject', models.CharField(max_length=100)),
                ('subject_code', models.CharField(max_length=32)),
                ('exam_type', models.CharField(choices=[('quiz', 'Quiz'), ('assignment', 'Assignment'), ('midterm', 'Midterm'), ('final', 'Final'), ('practical', 'Practical'), ('project', 'Project')], max_length=16)),
                ('raw_score', models.FloatField(validators=[django.core.validators.MinValueValidator(0)])),
                ('max_score', models.FloatField(validators=[django.core.validators.MinValueValidator(0)])),
                ('percentage', models.FloatField(default=0.0)),
                ('letter_grade', models.CharField(default='F', max_length=2)),
                ('grade_points', models.PositiveSmallIntegerField(default=0)),
                ('credits', models.PositiveSmallIntegerField(default=3, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(10)])),
                ('semester', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(8)])),
                ('academic_year', models.CharField(max_length=9, validators=[django.core.validators.RegexValidator(message='Academic year must be in format YYYY-YYYY (e.g., 2024-2025)', regex='^\\d{4}-\\d{4}$')])),
                ('exam_date', models.DateField(blank=True, null=True)),
                ('remarks', models.CharField(blank=True, max_length=500)),
                ('is_published', models.BooleanField(default=False)),
                ('published_at', models.DateTimeField(blank=True, null=True)),
                ('is_deleted', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('faculty', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='marks_records', to='academics.facultyprofile')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='marks_records', to='academics.studentprofile')),
            ],
            options={
                'ordering': ('-updated_at',),
                'indexes': [
                    models.Index(fields=['student', 'is_published', 'is_deleted'], name='marks_student_visible_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('student', 'faculty', 'subject', 'exam_type', 'semester', 'academic_year'), name='unique_marks_per_exam'),
                ],
            },
        ),
    ]
