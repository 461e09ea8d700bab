"""Orders app configuration."""

from django.apps import AppConfig

class OrdersConfig(AppConfig):
    """Django app config for checkout and order fulfilment."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'orders'
