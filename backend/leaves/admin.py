from django.contrib import admin

from .models import LeaveApplication


@admin.register(LeaveApplication)
class LeaveApplicationAdmin(admin.ModelAdmin):
    list_display = ('id', 'student', 'leave_type', 'from_date', 'to_date', 'total_days', 'priority', 'status', 'reviewer', 'applied_at')
    list_filter = ('status', 'leave_type', 'priority', 'is_half_day')
    search_fields = ('student__roll_number', 'applicant__username', 'reason')
    raw_id_fields = ('applicant', 'student', 'reviewer')
    readonly_fields = ('total_days', 'applied_at', 'review_date')
    date_hierarchy = 'from_date'
