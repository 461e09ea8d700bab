"""Database models for users and role-specific profiles."""

from django.db import models
from django.contrib.auth.models import AbstractUser


def _default_notification_preferences():
    return {'email': True, 'push': True, 'sms': False}


def _default_communication_preferences():
    return {'email': True, 'sms': False, 'order_updates': True, 'marketing': False}


def _default_operational_settings():
    return {'processing_time_days': 2, 'return_policy': '', 'shipping_regions': [], 'auto_accept_orders': False}


# 1. الموديل الأساسي للمستخدم
class User(AbstractUser):
    """Custom user model.

    Extends Django's :class:`~django.contrib.auth.models.AbstractUser` with:
    - ``user_type`` to separate buyer, seller and admin flows
    - optional ``phone_number``
    """

    USER_TYPE_CHOICES = (
        ('buyer', 'Buyer'),
        ('seller', 'Seller'),
        ('admin', 'Admin'),
    )
    phone_number = models.CharField(max_length=20, null=True, blank=True)
    user_type = models.CharField(max_length=10, choices=USER_TYPE_CHOICES, default='buyer')

    def __str__(self):
        return self.username

    @property
    def is_buyer(self):
        return self.user_type == 'buyer'

    @property
    def is_seller(self):
        return self.user_type == 'seller'

    @property
    def is_marketplace_admin(self):
        return self.user_type == 'admin' or self.is_superuser


# 2. البروفايلات المتخصصة
class BuyerProfile(models.Model):
    """Additional buyer-specific profile data."""

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='buyer_profile')
    phone_number = models.CharField(max_length=20, blank=True, null=True)
    shipping_address = models.TextField(blank=True, null=True)
    notification_preferences = models.JSONField(default=_default_notification_preferences, blank=True)

    def __str__(self):
        return f"Buyer profile of {self.user.username}"


class SellerProfile(models.Model):
    """Seller business details, verification state and payout settings.

    Bank fields are snapshotted onto each payout request, so editing them here
    never changes where an already-requested payout goes.
    """

    BUSINESS_TYPE_CHOICES = (
        ('fashion', 'Fashion'),
        ('electronics', 'Electronics'),
        ('food', 'Food'),
        ('home', 'Home'),
        ('beauty', 'Beauty'),
        ('other', 'Other'),
    )
    PAYOUT_METHOD_CHOICES = (
        ('bank', 'Bank transfer'),
        ('wallet', 'Wallet'),
    )

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='seller_profile')

    business_name = models.CharField(max_length=255, blank=True, null=True)
    business_type = models.CharField(max_length=20, choices=BUSINESS_TYPE_CHOICES, default='other')
    business_address = models.TextField(blank=True, null=True)
    business_phone = models.CharField(max_length=20, blank=True, null=True)
    business_description = models.TextField(blank=True, null=True)
    tax_number = models.CharField(max_length=50, blank=True, null=True)
    registration_number = models.CharField(max_length=50, blank=True, null=True)

    is_verified = models.BooleanField(default=False)
    verified_at = models.DateTimeField(null=True, blank=True)

    payout_method = models.CharField(max_length=10, choices=PAYOUT_METHOD_CHOICES, default='bank')
    bank_name = models.CharField(max_length=100, blank=True, null=True)
    account_number = models.CharField(max_length=20, blank=True, null=True)
    account_name = models.CharField(max_length=255, blank=True, null=True)
    bank_code = models.CharField(max_length=10, blank=True, null=True)
    recipient_code = models.CharField(max_length=100, blank=True, null=True)

    communication_preferences = models.JSONField(default=_default_communication_preferences, blank=True)
    operational_settings = models.JSONField(default=_default_operational_settings, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.business_name or f"Seller profile of {self.user.username}"

    @property
    def has_bank_details(self):
        return bool(self.bank_name and self.account_number)

    def bank_details_snapshot(self):
        return {
            'bank_name': self.bank_name or '',
            'account_number': self.account_number or '',
            'account_name': self.account_name or '',
            'bank_code': self.bank_code or '',
        }
