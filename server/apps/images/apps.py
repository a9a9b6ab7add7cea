"""Django app configuration for images app."""

from typing import override

from django.apps import AppConfig


class ImagesConfig(AppConfig):
    """Configuration for images app."""

    name = 'server.apps.images'
    verbose_name = 'Images'

    @override
    def ready(self) -> None:
        """Import signal handlers when app is ready."""
        from server.apps.images import signals  # noqa: F401
