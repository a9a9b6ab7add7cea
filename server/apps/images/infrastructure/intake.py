"""Multipart intake: a single image file buffered in memory."""

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Any, final, override

from django.conf import settings
from django.core.files.uploadedfile import InMemoryUploadedFile
from django.core.files.uploadhandler import FileUploadHandler, SkipFile
from django.http import HttpRequest

from server.apps.images.exceptions import FileTooLargeError, TooManyFilesError

logger = logging.getLogger(__name__)


@final
@dataclass(frozen=True, slots=True)
class InboundFile:
    """File received from the client, alive for one request."""

    original_name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        """Size of the file in bytes."""
        return len(self.data)


@final
class CappedMemoryUploadHandler(FileUploadHandler):
    """Buffer the upload field in memory and refuse oversized files.

    Unlike Django's ``MemoryFileUploadHandler`` this handler never hands
    the file over to a temporary-file handler: anything above
    ``MAX_UPLOAD_SIZE`` aborts the request while the body is parsed,
    before the view sees the file.
    """

    @override
    def __init__(self, request: HttpRequest | None = None) -> None:
        """Initialize the handler.

        Args:
            request: Request being parsed.
        """
        super().__init__(request)
        self.limit_bytes: int = settings.MAX_UPLOAD_SIZE
        self._buffer = BytesIO()
        self._received = 0
        self._started = False

    @override
    def new_file(self, field_name: str, *args: Any, **kwargs: Any) -> None:
        """Start a new file part, skipping fields other than the upload one.

        Args:
            field_name: Form field of the part.
            args: Remaining positional arguments from Django.
            kwargs: Remaining keyword arguments from Django.

        Raises:
            SkipFile: If the part is not under the upload field name.
            TooManyFilesError: If the upload field was already received.
        """
        super().new_file(field_name, *args, **kwargs)
        if field_name != settings.UPLOAD_FIELD_NAME:
            logger.debug('Skipping unexpected file field: %s', field_name)
            raise SkipFile
        if self._started:
            logger.warning(
                'Rejecting upload %s: more than one %s part',
                self.file_name,
                field_name,
            )
            raise TooManyFilesError
        self._started = True
        self._buffer = BytesIO()
        self._received = 0

    @override
    def receive_data_chunk(self, raw_data: bytes, start: int) -> None:
        """Append a chunk, enforcing the size limit.

        Args:
            raw_data: Chunk of file content.
            start: Offset of the chunk in the file.

        Raises:
            FileTooLargeError: If the file grows past the limit.
        """
        self._received += len(raw_data)
        if self._received > self.limit_bytes:
            logger.warning(
                'Rejecting upload %s: more than %d bytes',
                self.file_name,
                self.limit_bytes,
            )
            raise FileTooLargeError(self.limit_bytes)
        self._buffer.write(raw_data)

    @override
    def file_complete(self, file_size: int) -> InMemoryUploadedFile:
        """Wrap the buffered content as an uploaded file.

        Args:
            file_size: Total size reported by the parser.

        Returns:
            In-memory uploaded file for ``request.FILES``.
        """
        self._buffer.seek(0)
        return InMemoryUploadedFile(
            file=self._buffer,
            field_name=self.field_name,
            name=self.file_name,
            content_type=self.content_type,
            size=file_size,
            charset=self.charset,
            content_type_extra=self.content_type_extra,
        )


def read_inbound_file(request: HttpRequest) -> InboundFile | None:
    """Read the uploaded file from a multipart request.

    Accessing ``request.FILES`` runs the upload handlers, so an oversized
    file or a repeated file part raises here. A missing part is left to
    the upload logic.

    Args:
        request: Multipart request.

    Returns:
        InboundFile, or None if the request has no file part.

    Raises:
        FileTooLargeError: If the file exceeds ``MAX_UPLOAD_SIZE``.
        TooManyFilesError: If more than one file part was sent.
    """
    uploaded = request.FILES.get(settings.UPLOAD_FIELD_NAME)
    if uploaded is None:
        return None

    data = uploaded.read()
    return InboundFile(
        original_name=uploaded.name or '',
        mime_type=uploaded.content_type or '',
        data=data,
    )
