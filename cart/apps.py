"""Cart app configuration."""

from django.apps import AppConfig


class CartConfig(AppConfig):
    """Django app config for buyer carts."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'cart'
