"""Custom storage backend for S3-compatible storage."""

import logging
from collections.abc import Sequence
from typing import Any, Final, final, override

from botocore.exceptions import ClientError
from django.core.files.base import ContentFile
from storages.backends.s3 import S3Storage
from storages.utils import clean_name

logger = logging.getLogger(__name__)

_MISSING_KEY_CODES: Final = frozenset(('404', 'NoSuchKey'))


@final
class TaggedContentFile(ContentFile):
    """In-memory file content that carries provider tags."""

    def __init__(
        self,
        content: bytes,
        name: str,
        tags: Sequence[str] = (),
    ) -> None:
        """Initialize TaggedContentFile.

        Args:
            content: File bytes.
            name: File name.
            tags: Tags stored next to the object.
        """
        super().__init__(content, name=name)
        self.tags = tuple(tags)


@final
class ImageStorage(S3Storage):
    """Custom S3 storage backend for uploaded images.

    Extends django-storages S3Storage with:
    - Tags from ``TaggedContentFile`` written as object metadata
    - Existence checks that ignore ``file_overwrite``
    - Enhanced error logging
    """

    @override
    def save(
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save file to S3 with error handling and logging.

        Args:
            name: Storage key for the file.
            content: File content (file-like object).
            max_length: Optional maximum length for the filename.

        Returns:
            Actual storage key used.

        Raises:
            Exception: If S3 upload fails.
        """
        try:
            logger.info('Uploading file to storage: %s', name)
            saved_name = super().save(name, content, max_length)
            logger.info('Successfully uploaded file: %s', saved_name)
        except Exception:
            logger.exception('Failed to upload file to storage: %s', name)
            raise
        else:
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete file from S3 with error handling and logging.

        Args:
            name: Storage key of file to delete.

        Raises:
            Exception: If S3 delete fails.
        """
        try:
            logger.info('Deleting file from storage: %s', name)
            super().delete(name)
            logger.info('Successfully deleted file: %s', name)
        except Exception:
            logger.exception('Failed to delete file from storage: %s', name)
            raise

    def object_exists(self, name: str) -> bool:
        """Check for the object with a HEAD request.

        Unlike ``exists()`` this ignores ``file_overwrite`` and always
        asks the bucket.

        Args:
            name: Storage key.

        Returns:
            True if the object is in the bucket.

        Raises:
            ClientError: For S3 errors other than a missing key.
        """
        key = self._normalize_name(clean_name(name))
        try:
            self.connection.meta.client.head_object(
                Bucket=self.bucket_name,
                Key=key,
            )
        except ClientError as error:
            if error.response['Error']['Code'] in _MISSING_KEY_CODES:
                return False
            raise
        return True

    @override
    def _get_write_parameters(
        self,
        name: str,
        content: Any = None,
    ) -> dict[str, Any]:
        params = super()._get_write_parameters(name, content)
        tags = getattr(content, 'tags', ())
        if tags:
            metadata = dict(params.get('Metadata', {}))
            metadata['tags'] = ','.join(tags)
            params['Metadata'] = metadata
        return params
