from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import CartViewSet, CartItemViewSet

router = DefaultRouter()

router.register(r'cart-items', CartItemViewSet, basename='cart-items')

# المسار الرئيسي للسلة
router.register(r'', CartViewSet, basename='cart-main')

urlpatterns = [
    path('', include(router.urls)),
]
