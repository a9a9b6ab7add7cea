"""Storage gateways: the remote providers that hold uploaded images.

The rest of the app only talks to ``StorageGateway``; the concrete
provider is picked by the ``IMAGE_GATEWAY_BACKEND`` setting.
"""

import abc
import base64
import logging
import posixpath
from dataclasses import dataclass
from functools import cache
from typing import Self, final, override

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.files.storage import storages
from django.utils.module_loading import import_string
from imagekitio import ImageKit
from imagekitio.models.UploadFileRequestOptions import (
    UploadFileRequestOptions,
)

from server.apps.images.infrastructure.storage import (
    ImageStorage,
    TaggedContentFile,
)

logger = logging.getLogger(__name__)


@final
@dataclass(frozen=True, slots=True)
class StoredAsset:
    """File as stored by the provider."""

    url: str
    file_id: str


@final
@dataclass(frozen=True, slots=True)
class UploadOptions:
    """Provider options for a single upload."""

    folder: str
    tags: tuple[str, ...] = ()
    use_unique_file_name: bool = False
    is_private_file: bool = False


class StorageGateway(abc.ABC):
    """Remote storage for uploaded images."""

    @classmethod
    @abc.abstractmethod
    def from_settings(cls) -> Self:
        """Build the gateway from Django settings.

        Raises:
            ImproperlyConfigured: If credentials are missing.
        """

    @abc.abstractmethod
    def upload(
        self,
        data: bytes,
        file_name: str,
        options: UploadOptions,
    ) -> StoredAsset:
        """Store ``data`` under ``file_name`` and return where it lives."""

    @abc.abstractmethod
    def delete_file(self, file_id: str) -> None:
        """Delete a stored file by its provider identifier."""


@final
class ImageKitGateway(StorageGateway):
    """Gateway backed by the ImageKit media API."""

    def __init__(self, client: ImageKit) -> None:
        """Initialize ImageKitGateway.

        Args:
            client: Configured ImageKit SDK client.
        """
        self._client = client

    @override
    @classmethod
    def from_settings(cls) -> Self:
        """Build the gateway from ``IMAGEKIT_*`` settings.

        Returns:
            ImageKitGateway with a signed server-side client.

        Raises:
            ImproperlyConfigured: If a key or the URL endpoint is missing.
        """
        credentials = {
            'IMAGEKIT_PUBLIC_KEY': settings.IMAGEKIT_PUBLIC_KEY,
            'IMAGEKIT_PRIVATE_KEY': settings.IMAGEKIT_PRIVATE_KEY,
            'IMAGEKIT_URL_ENDPOINT': settings.IMAGEKIT_URL_ENDPOINT,
        }
        missing = [name for name, setting in credentials.items() if not setting]
        if missing:
            raise ImproperlyConfigured(
                'Missing ImageKit settings: {0}'.format(', '.join(missing)),
            )

        return cls(
            ImageKit(
                public_key=settings.IMAGEKIT_PUBLIC_KEY,
                private_key=settings.IMAGEKIT_PRIVATE_KEY,
                url_endpoint=settings.IMAGEKIT_URL_ENDPOINT,
            ),
        )

    @override
    def upload(
        self,
        data: bytes,
        file_name: str,
        options: UploadOptions,
    ) -> StoredAsset:
        """Upload the file through the ImageKit upload API.

        Args:
            data: File bytes.
            file_name: Name to store the file under.
            options: Folder, tags and naming/visibility flags.

        Returns:
            StoredAsset with the public URL and ImageKit file ID.
            The URL is empty if ImageKit did not return one.
        """
        logger.info('Uploading to ImageKit: %s/%s', options.folder, file_name)
        result = self._client.upload_file(
            file=base64.b64encode(data).decode('ascii'),
            file_name=file_name,
            options=UploadFileRequestOptions(
                use_unique_file_name=options.use_unique_file_name,
                folder=options.folder,
                is_private_file=options.is_private_file,
                tags=list(options.tags),
            ),
        )
        return StoredAsset(
            url=result.url or '',
            file_id=result.file_id or '',
        )

    @override
    def delete_file(self, file_id: str) -> None:
        """Delete a file from ImageKit.

        Args:
            file_id: ImageKit file ID.
        """
        logger.info('Deleting from ImageKit: %s', file_id)
        self._client.delete_file(file_id=file_id)


@final
class S3Gateway(StorageGateway):
    """Gateway backed by an S3-compatible bucket.

    The object key doubles as the file ID. Objects are written exactly
    under the given name and served over unsigned URLs.
    """

    def __init__(self, storage: ImageStorage) -> None:
        """Initialize S3Gateway.

        Args:
            storage: Storage backend for the bucket.
        """
        self._storage = storage

    @override
    @classmethod
    def from_settings(cls) -> Self:
        """Build the gateway from the ``default`` entry of ``STORAGES``.

        Returns:
            S3Gateway using the default storage backend.

        Raises:
            ImproperlyConfigured: If bucket or keys are missing.
        """
        storage_options = settings.STORAGES['default']['OPTIONS']
        required = ('bucket_name', 'access_key', 'secret_key')
        missing = [name for name in required if not storage_options.get(name)]
        if missing:
            raise ImproperlyConfigured(
                'Missing S3 storage options: {0}'.format(', '.join(missing)),
            )
        return cls(storages['default'])

    @override
    def upload(
        self,
        data: bytes,
        file_name: str,
        options: UploadOptions,
    ) -> StoredAsset:
        """Put the file into the bucket under ``<folder>/<file_name>``.

        Args:
            data: File bytes.
            file_name: Name to store the file under.
            options: Folder and tags; only public, non-renamed uploads.

        Returns:
            StoredAsset with the public URL and the object key.

        Raises:
            ValueError: If unique naming or private files are requested.
        """
        if options.use_unique_file_name or options.is_private_file:
            raise ValueError(
                'S3 backend stores public files under the exact given name',
            )

        folder = options.folder.strip('/')
        key = posixpath.join(folder, file_name) if folder else file_name
        saved_key = self._storage.save(
            key,
            TaggedContentFile(data, name=file_name, tags=options.tags),
        )
        return StoredAsset(url=self._storage.url(saved_key), file_id=saved_key)

    @override
    def delete_file(self, file_id: str) -> None:
        """Delete an object from the bucket.

        Args:
            file_id: Object key.

        Raises:
            FileNotFoundError: If no object has this key.
        """
        if not self._storage.object_exists(file_id):
            raise FileNotFoundError(f'File not found: {file_id}')
        self._storage.delete(file_id)


@cache
def get_gateway() -> StorageGateway:
    """Get the configured storage gateway, built once per process.

    Returns:
        Gateway named by ``IMAGE_GATEWAY_BACKEND``.

    Raises:
        ImproperlyConfigured: If the backend's credentials are missing.
    """
    backend: type[StorageGateway] = import_string(
        settings.IMAGE_GATEWAY_BACKEND,
    )
    gateway = backend.from_settings()
    logger.info('Storage gateway ready: %s', backend.__name__)
    return gateway
