from django.contrib import admin
from django.db import transaction

from .models import (
    StudentProfile,
    FacultyProfile,
    FacultyStudentAssignment,
    AttendanceRecord,
    MarksRecord,
)
from .services import academic_records


class FacultyStudentAssignmentInline(admin.TabularInline):
    model = FacultyStudentAssignment
    fk_name = 'faculty'
    extra = 0
    raw_id_fields = ('student',)
    readonly_fields = ('assigned_by', 'assigned_at')


@admin.register(StudentProfile)
class StudentProfileAdmin(admin.ModelAdmin):
    list_display = ('roll_number', 'user', 'course', 'semester', 'department', 'cumulative_gpa', 'is_active')
    list_filter = ('semester', 'department', 'course', 'is_active')
    search_fields = ('roll_number', 'user__username', 'user__first_name', 'user__last_name')
    readonly_fields = ('cumulative_gpa', 'total_credits')
    raw_id_fields = ('user',)


@admin.register(FacultyProfile)
class FacultyProfileAdmin(admin.ModelAdmin):
    list_display = ('employee_code', 'user', 'department', 'designation', 'is_active')
    list_filter = ('department', 'designation', 'is_active')
    search_fields = ('employee_code', 'user__username', 'user__first_name', 'user__last_name')
    raw_id_fields = ('user',)
    inlines = (FacultyStudentAssignmentInline,)

    def save_formset(self, request, form, formset, change):
        instances = formset.save(commit=False)
        for obj in instances:
            if isinstance(obj, FacultyStudentAssignment) and obj.assigned_by_id is None:
                obj.assigned_by = request.user
            obj.save()
        for obj in formset.deleted_objects:
            obj.delete()
        formset.save_m2m()


@admin.register(AttendanceRecord)
class AttendanceRecordAdmin(admin.ModelAdmin):
    list_display = ('student', 'subject_code', 'date', 'status', 'faculty', 'class_type', 'is_deleted')
    list_filter = ('status', 'class_type', 'academic_year', 'semester', 'is_deleted')
    search_fields = ('student__roll_number', 'subject', 'subject_code')
    raw_id_fields = ('student', 'faculty')
    date_hierarchy = 'date'


@admin.register(MarksRecord)
class MarksRecordAdmin(admin.ModelAdmin):
    list_display = ('student', 'subject_code', 'exam_type', 'raw_score', 'max_score', 'letter_grade', 'is_published', 'is_deleted')
    list_filter = ('exam_type', 'is_published', 'academic_year', 'semester', 'is_deleted')
    search_fields = ('student__roll_number', 'subject', 'subject_code')
    raw_id_fields = ('student', 'faculty')
    readonly_fields = ('percentage', 'letter_grade', 'grade_points')

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        academic_records.refresh_student_aggregates(obj.student_id)

    def delete_model(self, request, obj):
        student_id = obj.student_id
        super().delete_model(request, obj)
        academic_records.refresh_student_aggregates(student_id)

    def delete_queryset(self, request, queryset):
        student_ids = set(queryset.values_list('student_id', flat=True))
        with transaction.atomic():
            super().delete_queryset(request, queryset)
            for student_id in student_ids:
                academic_records.refresh_student_aggregates(student_id)
