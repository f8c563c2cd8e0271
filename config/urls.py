"""
URL configuration for the Baladi API.

    /api/accounts/   current user, referral codes
    /api/orders/     order placement, status transitions, history
    /api/points/     points balance, ledger, admin adjustments
    /api/admin/      weekly periods and settlements (admin role)
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from config.views import health_check

urlpatterns = [
    # Health check
    path('api/health/', health_check, name='health-check'),

    # Django admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='api-schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='api-schema'), name='api-docs'),

    # Authentication
    path('api/auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # API endpoints
    path('api/accounts/', include('apps.accounts.urls')),
    path('api/orders/', include('apps.orders.urls')),
    path('api/points/', include('apps.points.urls')),
    path('api/admin/', include('apps.settlements.urls')),
]

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)


# Custom error handlers
handler404 = 'config.views.error_404'
handler500 = 'config.views.error_500'
