"""URL configuration for the marketplace project."""
from django.contrib import admin
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView
from django.conf import settings
from django.conf.urls.static import static

from accounts.views_admin import AdminUserViewSet, SellerVerificationViewSet, admin_dashboard
from finance.views_admin import AdminPayoutViewSet, platform_earnings


admin_router = DefaultRouter()
admin_router.register(r'users', AdminUserViewSet, basename='admin-user')
admin_router.register(r'verifications', SellerVerificationViewSet, basename='admin-verification')
admin_router.register(r'payouts', AdminPayoutViewSet, basename='admin-payout')

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/accounts/', include('accounts.urls')),
    path('api/cart/', include('cart.urls')),
    path('api/messages/', include('messaging.urls')),
    path('api/help/', include('helpdesk.urls')),
    path('api/admin/dashboard/', admin_dashboard, name='admin-dashboard'),
    path('api/admin/earnings/', platform_earnings, name='admin-earnings'),
    path('api/admin/', include(admin_router.urls)),
    path('api/', include('products.urls')),
    path('api/', include('orders.urls')),
    path('api/', include('finance.urls')),
    # توثيق الـ API
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
] + static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
