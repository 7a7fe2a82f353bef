from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import User
from academics.models import StudentProfile, FacultyProfile


class StudentProfileInline(admin.StackedInline):
    model = StudentProfile
    can_delete = False
    verbose_name = 'Student profile'
    verbose_name_plural = 'Student profile'
    fk_name = 'user'
    readonly_fields = ('cumulative_gpa', 'total_credits')


class FacultyProfileInline(admin.StackedInline):
    model = FacultyProfile
    can_delete = False
    verbose_name = 'Faculty profile'
    verbose_name_plural = 'Faculty profile'
    fk_name = 'user'


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    # inherit Django's user add/change forms which correctly handle password hashing
    list_display = ('username', 'email', 'role', 'registration_status', 'mobile_no', 'is_active', 'is_staff')
    list_filter = ('role', 'registration_status', 'is_active', 'is_staff')
    inlines = (StudentProfileInline, FacultyProfileInline)

    fieldsets = DjangoUserAdmin.fieldsets + (
        ('Portal', {'fields': ('role', 'mobile_no')}),
        ('Registration', {'fields': (
            'registration_status', 'registration_reviewed_by', 'registration_reviewed_at', 'registration_note',
        )}),
    )
    readonly_fields = ('registration_reviewed_by', 'registration_reviewed_at')
    add_fieldsets = DjangoUserAdmin.add_fieldsets + (
        ('Portal', {'fields': ('role',)}),
    )

    def get_inline_instances(self, request, obj=None):
        # Only show the inline matching the user's role
        if obj is None:
            return []
        inlines = []
        for inline in super().get_inline_instances(request, obj):
            if obj.role == User.Role.STUDENT and isinstance(inline, StudentProfileInline):
                inlines.append(inline)
            elif obj.role == User.Role.FACULTY and isinstance(inline, FacultyProfileInline):
                inlines.append(inline)
        return inlines
