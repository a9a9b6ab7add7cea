"""Business logic for image operations."""

import logging
from collections.abc import Sequence
from typing import Final

from server.apps.images.exceptions import (
    DeleteFailedError,
    InvalidTypeError,
    MissingFileError,
    MissingFileIdError,
    UploadFailedError,
)
from server.apps.images.infrastructure.gateway import (
    StorageGateway,
    StoredAsset,
    UploadOptions,
)
from server.apps.images.infrastructure.intake import InboundFile
from server.apps.images.infrastructure.naming import generate_storage_key

logger = logging.getLogger(__name__)

_IMAGE_MIME_PREFIX: Final = 'image/'
_NO_URL_MESSAGE: Final = 'ImageKit upload failed'


def upload_image(
    inbound: InboundFile | None,
    gateway: StorageGateway,
    *,
    folder: str,
    tags: Sequence[str] = (),
) -> StoredAsset:
    """Validate an uploaded image and store it with the provider.

    The file is stored under a generated key, never under the client's
    filename, as a public file the provider must not rename.

    Args:
        inbound: File from the request, or None if none was sent.
        gateway: Storage provider.
        folder: Provider folder for the file.
        tags: Provider tags for the file.

    Returns:
        StoredAsset with the public URL and provider file ID.

    Raises:
        MissingFileError: If no file was sent.
        InvalidTypeError: If the file is not an image.
        UploadFailedError: If the provider fails or returns no URL.
    """
    if inbound is None:
        raise MissingFileError

    if not inbound.mime_type.startswith(_IMAGE_MIME_PREFIX):
        raise InvalidTypeError

    storage_key = generate_storage_key(inbound.original_name)
    options = UploadOptions(
        folder=folder,
        tags=tuple(tags),
        use_unique_file_name=False,
        is_private_file=False,
    )

    logger.info(
        'Uploading image %s as %s (%d bytes)',
        inbound.original_name,
        storage_key,
        inbound.size,
    )
    try:
        asset = gateway.upload(inbound.data, storage_key, options)
    except Exception as error:
        logger.exception('Upload failed for %s', storage_key)
        raise UploadFailedError(_provider_message(error)) from error

    if not asset.url:
        logger.error('Provider returned no URL for %s', storage_key)
        raise UploadFailedError(_NO_URL_MESSAGE)

    logger.info('Image uploaded: %s (ID: %s)', asset.url, asset.file_id)
    return asset


def delete_image(file_id: object, gateway: StorageGateway) -> None:
    """Delete a stored image by its provider file ID.

    Deleting an unknown or already deleted ID fails the way the provider
    fails; nothing is suppressed.

    Args:
        file_id: Provider file ID as sent by the client.
        gateway: Storage provider.

    Raises:
        MissingFileIdError: If file_id is missing or not a non-empty string.
        DeleteFailedError: If the provider fails.
    """
    if not isinstance(file_id, str) or not file_id:
        raise MissingFileIdError

    logger.info('Deleting image: %s', file_id)
    try:
        gateway.delete_file(file_id)
    except Exception as error:
        logger.exception('Delete failed for %s', file_id)
        raise DeleteFailedError(_provider_message(error)) from error

    logger.info('Image deleted: %s', file_id)


def _provider_message(error: Exception) -> str | None:
    """Get the human-readable message of a provider error.

    SDK exceptions keep their text in ``message``; others use ``str``.

    Args:
        error: Exception raised by the gateway.

    Returns:
        Message, or None if the error has no text.
    """
    message = getattr(error, 'message', None)
    if isinstance(message, str) and message:
        return message
    return str(error) or None
