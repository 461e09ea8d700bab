"""Role-based DRF permissions shared across apps."""

from rest_framework import permissions


class IsBuyer(permissions.BasePermission):
    """
    تسمح فقط للمستخدمين من نوع buyer.
    """
    message = 'Buyer account required.'

    def has_permission(self, request, view):
        return request.user.is_authenticated and getattr(request.user, 'user_type', None) == 'buyer'


class IsSeller(permissions.BasePermission):
    """
    تسمح فقط للمستخدمين من نوع seller بالقيام بالعمليات.
    """
    message = 'Seller account required.'

    def has_permission(self, request, view):
        return request.user.is_authenticated and getattr(request.user, 'user_type', None) == 'seller'


class IsAdmin(permissions.BasePermission):
    """Marketplace administrators (``user_type='admin'``) and superusers."""

    message = 'Admin account required.'

    def has_permission(self, request, view):
        user = request.user
        if not user.is_authenticated:
            return False
        return getattr(user, 'user_type', None) == 'admin' or user.is_superuser


class IsProductOwner(permissions.BasePermission):
    """
    تسمح للبائع بتعديل منتجاته الخاصة فقط.
    """
    def has_object_permission(self, request, view, obj):
        return obj.seller == request.user
