"""Signal handlers for images app."""

import logging
from typing import Final

from django.core.signals import setting_changed
from django.dispatch import receiver

from server.apps.images.infrastructure.gateway import get_gateway

logger = logging.getLogger(__name__)

# Settings the cached gateway is built from
_GATEWAY_SETTINGS: Final = frozenset((
    'IMAGE_GATEWAY_BACKEND',
    'IMAGEKIT_PUBLIC_KEY',
    'IMAGEKIT_PRIVATE_KEY',
    'IMAGEKIT_URL_ENDPOINT',
    'STORAGES',
))


@receiver(setting_changed)
def reset_gateway(
    sender: object,
    setting: str,
    **kwargs: object,
) -> None:
    """Drop the cached storage gateway when its settings change.

    Settings only change at runtime under ``override_settings`` in tests.

    Args:
        sender: Signal sender.
        setting: Name of the changed setting.
        **kwargs: Additional signal arguments.
    """
    if setting in _GATEWAY_SETTINGS:
        logger.debug('Resetting storage gateway after %s changed', setting)
        get_gateway.cache_clear()
