"""Signals for finance side-effects."""

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Wallet


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_seller_wallet(sender, instance, created, **kwargs):
    """Every seller gets a wallet as soon as the account exists."""
    if getattr(instance, 'user_type', None) == 'seller':
        Wallet.objects.get_or_create(seller=instance)
