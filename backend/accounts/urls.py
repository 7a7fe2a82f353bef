from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    RegisterView,
    RegistrationApproveView,
    RegistrationListView,
    RegistrationRejectView,
    RegistrationStatsView,
    MeView,
    CustomTokenObtainPairView,
)

urlpatterns = [
    path('register/', RegisterView.as_view(), name='register'),
    path('registrations/', RegistrationListView.as_view(), name='registrations'),
    path('registrations/stats/', RegistrationStatsView.as_view(), name='registration-stats'),
    path('registrations/<int:user_id>/approve/', RegistrationApproveView.as_view(), name='registration-approve'),
    path('registrations/<int:user_id>/reject/', RegistrationRejectView.as_view(), name='registration-reject'),
    path('me/', MeView.as_view(), name='me'),
    path('token/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
]
