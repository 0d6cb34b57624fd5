from django.urls import path, include
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .auth_views import (
    LoginAPIView, LogoutAPIView, CheckAuthAPIView, RegisterAPIView,
    PasswordResetAPIView, PasswordResetConfirmAPIView,
)
from .health import health_check, readiness, liveness

urlpatterns = [
    # Health check endpoints (public - no auth required)
    path('health/', health_check, name='api_health_check'),
    path('health/ready/', readiness, name='api_readiness'),
    path('health/live/', liveness, name='api_liveness'),

    # Session-based authentication endpoints
    path('auth/login/', LoginAPIView.as_view(), name='api_login'),
    path('auth/logout/', LogoutAPIView.as_view(), name='api_logout'),
    path('auth/check/', CheckAuthAPIView.as_view(), name='api_check_auth'),
    path('auth/register/', RegisterAPIView.as_view(), name='api_register'),
    path('auth/password-reset/', PasswordResetAPIView.as_view(), name='api_password_reset'),
    path('auth/password-reset/confirm/', PasswordResetConfirmAPIView.as_view(), name='api_password_reset_confirm'),

    # Bearer token authentication endpoints
    path('auth/token/', TokenObtainPairView.as_view(), name='api_token_obtain'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='api_token_refresh'),

    # API v1 endpoints
    path('v1/businesses/', include('apps.businesses.api.urls')),
    path('v1/contacts/', include('apps.contacts.api.urls')),
    path('v1/bank-accounts/', include('apps.bank_accounts.api.urls')),
    path('v1/', include('apps.invoices.api.urls')),  # Router includes both invoices/ and bills/
    path('v1/', include('apps.payments.api.urls')),  # Router includes both payments/ and receipts/
    path('v1/purchases/', include('apps.purchases.api.urls')),
    path('v1/dashboard/', include('apps.dashboard.api.urls')),
    path('v1/assistant/', include('apps.assistant.api.urls')),
]
