"""Buyer and seller order routes (mounted under /api/)."""

from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import BuyerOrderViewSet, buyer_dashboard
from .views_seller import SellerOrderViewSet, seller_dashboard

buyer_router = SimpleRouter()
buyer_router.register(r'orders', BuyerOrderViewSet, basename='buyer-order')

seller_router = SimpleRouter()
seller_router.register(r'orders', SellerOrderViewSet, basename='seller-order')

urlpatterns = [
    path('buyer/dashboard/', buyer_dashboard, name='buyer-dashboard'),
    path('buyer/', include(buyer_router.urls)),
    path('seller/dashboard/', seller_dashboard, name='seller-dashboard'),
    path('seller/', include(seller_router.urls)),
]
