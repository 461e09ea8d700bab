"""Messaging app configuration."""

from django.apps import AppConfig


class MessagingConfig(AppConfig):
    """Buyer to seller conversations."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'messaging'
