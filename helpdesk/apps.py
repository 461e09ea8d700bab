"""Helpdesk app configuration."""

from django.apps import AppConfig


class HelpdeskConfig(AppConfig):
    """Help center content and support requests."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'helpdesk'
