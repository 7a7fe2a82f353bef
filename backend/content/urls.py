from django.urls import path

from .views import (
    NoticeDetailView,
    NoticeListCreateView,
    ResourceDetailView,
    ResourceDownloadView,
    ResourceListCreateView,
)

urlpatterns = [
    path('notices/', NoticeListCreateView.as_view(), name='content-notices'),
    path('notices/<int:notice_id>/', NoticeDetailView.as_view(), name='content-notice-detail'),
    path('resources/', ResourceListCreateView.as_view(), name='content-resources'),
    path('resources/<int:resource_id>/', ResourceDetailView.as_view(), name='content-resource-detail'),
    path('resources/<int:resource_id>/download/', ResourceDownloadView.as_view(), name='content-resource-download'),
]
