import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('academics', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Notice',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('all_students', models.BooleanField(default=False)),
                ('target_courses', models.JSONField(blank=True, default=list)),
                ('target_semesters', models.JSONField(blank=True, default=list)),
                ('target_departments', models.JSONField(blank=True, default=list)),
                ('target_student_ids', models.JSONField(blank=True, default=list)),
                ('is_active', models.BooleanField(default=True)),
                ('expiry_date', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('title', models.CharField(max_length=200)),
                ('content', models.TextField(max_length=2000)),
                ('priority', models.CharField(choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High'), ('urgent', 'Urgent')], default='medium', max_length=8)),
                ('category', models.CharField(choices=[('general', 'General'), ('academic', 'Academic'), ('exam', 'Exam'), ('event', 'Event'), ('holiday', 'Holiday'), ('assignment', 'Assignment'), ('announcement', 'Announcement')], max_length=16)),
                ('is_draft', models.BooleanField(default=False)),
                ('publish_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('view_count', models.PositiveIntegerField(default=0)),
                ('is_important', models.BooleanField(default=False)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='notices', to='academics.facultyprofile')),
            ],
            options={
                'ordering': ('-is_important', '-publish_date'),
                'indexes': [models.Index(fields=['is_active', 'is_draft', 'publish_date'], name='notice_live_idx')],
            },
        ),
        migrations.CreateModel(
            name='Resource',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('all_students', models.BooleanField(default=False)),
                ('target_courses', models.JSONField(blank=True, default=list)),
                ('target_semesters', models.JSONField(blank=True, default=list)),
                ('target_departments', models.JSONField(blank=True, default=list)),
                ('target_student_ids', models.JSONField(blank=True, default=list)),
                ('is_active', models.BooleanField(default=True)),
                ('expiry_date', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True, max_length=1000)),
                ('subject', models.CharField(max_length=100)),
                ('subject_code', models.CharField(blank=True, max_length=32)),
                ('resource_type', models.CharField(choices=[('lecture_notes', 'Lecture notes'), ('assignment', 'Assignment'), ('reference_material', 'Reference material'), ('syllabus', 'Syllabus'), ('previous_papers', 'Previous papers'), ('lab_manual', 'Lab manual'), ('presentation', 'Presentation'), ('video', 'Video'), ('other', 'Other')], default='other', max_length=32)),
                ('file', models.FileField(upload_to='resources/%Y/%m/%d/')),
                ('original_name', models.CharField(blank=True, max_length=255)),
                ('file_size', models.PositiveBigIntegerField(default=0)),
                ('mime_type', models.CharField(blank=True, max_length=100)),
                ('is_public', models.BooleanField(default=False)),
                ('semester', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('academic_year', models.CharField(blank=True, max_length=9)),
                ('download_count', models.PositiveIntegerField(default=0)),
                ('uploaded_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='resources', to='academics.facultyprofile')),
            ],
            options={
                'ordering': ('-uploaded_at',),
            },
        ),
        migrations.CreateModel(
            name='NoticeView',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('viewed_at', models.DateTimeField(auto_now_add=True)),
                ('notice', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='views', to='content.notice')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'constraints': [models.UniqueConstraint(fields=('notice', 'user'), name='unique_notice_view')],
            },
        ),
    ]
