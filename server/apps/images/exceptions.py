"""Exceptions for images app.

Each exception carries the HTTP status and the client-facing message,
so views only have to render them.
"""

from http import HTTPStatus
from typing import ClassVar

_SERVER_ERROR = 'Server error'


class ImageGatewayError(Exception):
    """Base class for every error answered by the image gateway."""

    status_code: ClassVar[int] = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message: ClassVar[str] = _SERVER_ERROR

    def __init__(self, message: str | None = None) -> None:
        """Initialize ImageGatewayError.

        Args:
            message: Client-facing message, falls back to the class default.
        """
        self.message = message or self.default_message
        super().__init__(self.message)


class OriginDeniedError(ImageGatewayError):
    """Raised when the request origin is not in the allow-list."""

    status_code = HTTPStatus.FORBIDDEN
    default_message = 'Not allowed by CORS'


class MissingFileError(ImageGatewayError):
    """Raised when an upload request carries no file part."""

    status_code = HTTPStatus.BAD_REQUEST
    default_message = 'No file provided'


class TooManyFilesError(ImageGatewayError):
    """Raised when an upload request carries more than one file part."""

    status_code = HTTPStatus.BAD_REQUEST
    default_message = 'Only one file can be uploaded'


class InvalidTypeError(ImageGatewayError):
    """Raised when the uploaded file is not an image."""

    status_code = HTTPStatus.BAD_REQUEST
    default_message = 'Only image uploads are allowed'


class FileTooLargeError(ImageGatewayError):
    """Raised while parsing an upload that exceeds the size limit."""

    status_code = HTTPStatus.REQUEST_ENTITY_TOO_LARGE
    default_message = 'File too large'

    def __init__(self, limit_bytes: int) -> None:
        """Initialize FileTooLargeError.

        Args:
            limit_bytes: Maximum accepted file size in bytes.
        """
        self.limit_bytes = limit_bytes
        super().__init__()


class MissingFileIdError(ImageGatewayError):
    """Raised when a delete request does not name a file."""

    status_code = HTTPStatus.BAD_REQUEST
    default_message = 'fileId is required'


class UploadFailedError(ImageGatewayError):
    """Raised when the storage provider rejects or fails an upload."""


class DeleteFailedError(ImageGatewayError):
    """Raised when the storage provider fails to delete a file."""
