from django.urls import path

from .views import (
    LeaveApproveView,
    LeaveCancelView,
    LeaveDetailView,
    LeaveListCreateView,
    LeaveRejectView,
    LeaveStatsView,
)

urlpatterns = [
    path('', LeaveListCreateView.as_view(), name='leaves'),
    path('stats/', LeaveStatsView.as_view(), name='leave-stats'),
    path('<int:leave_id>/', LeaveDetailView.as_view(), name='leave-detail'),
    path('<int:leave_id>/approve/', LeaveApproveView.as_view(), name='leave-approve'),
    path('<int:leave_id>/reject/', LeaveRejectView.as_view(), name='leave-reject'),
    path('<int:leave_id>/cancel/', LeaveCancelView.as_view(), name='leave-cancel'),
]
