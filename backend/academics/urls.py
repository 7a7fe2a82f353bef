from django.urls import path

from .views import (
    AssignmentView,
    AttendanceDetailView,
    AttendanceListCreateView,
    AttendanceSummaryView,
    DashboardView,
    FacultyListCreateView,
    GpaView,
    MarksDetailView,
    MarksListCreateView,
    MarksPublishView,
    ProfileView,
    StudentDetailView,
    StudentListView,
)

urlpatterns = [
    path('profile/', ProfileView.as_view(), name='academics-profile'),
    path('students/', StudentListView.as_view(), name='academics-students'),
    path('students/<int:student_id>/', StudentDetailView.as_view(), name='academics-student-detail'),
    path('faculty/', FacultyListCreateView.as_view(), name='academics-faculty'),
    path('assignments/', AssignmentView.as_view(), name='academics-assignments'),

    path('attendance/', AttendanceListCreateView.as_view(), name='academics-attendance'),
    path('attendance/summary/', AttendanceSummaryView.as_view(), name='academics-attendance-summary'),
    path('attendance/<int:record_id>/', AttendanceDetailView.as_view(), name='academics-attendance-detail'),

    path('marks/', MarksListCreateView.as_view(), name='academics-marks'),
    path('marks/publish/', MarksPublishView.as_view(), name='academics-marks-publish'),
    path('marks/<int:record_id>/', MarksDetailView.as_view(), name='academics-marks-detail'),

    path('gpa/', GpaView.as_view(), name='academics-gpa'),
    path('dashboard/', DashboardView.as_view(), name='academics-dashboard'),
]
