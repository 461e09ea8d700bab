"""Payment and payout routes (mounted under /api/)."""

from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views
from .views_seller import SellerPayoutViewSet

payout_router = SimpleRouter()
payout_router.register(r'payouts', SellerPayoutViewSet, basename='payout')

urlpatterns = [
    # 1. الدفع
    path('payments/initialize/', views.initialize_payment, name='payment-initialize'),
    path('payments/verify/', views.verify_payment, name='payment-verify'),
    path('payments/webhook/', views.paystack_webhook, name='payment-webhook'),

    # 2. سحب أرباح البائع
    path('', include(payout_router.urls)),
]
