"""Shared fixtures for images app tests."""

import boto3
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from moto import mock_aws

from server.apps.images import views
from server.apps.images.infrastructure.gateway import (
    S3Gateway,
    StorageGateway,
    StoredAsset,
    UploadOptions,
)
from server.apps.images.infrastructure.storage import ImageStorage

# 10 bytes starting with the JPEG magic number
JPEG_BYTES = b'\xff\xd8\xff\xe0\x00\x10JFIF'


class FakeGateway(StorageGateway):
    """In-memory storage gateway recording every call."""

    def __init__(self) -> None:
        self.uploads: list[tuple[bytes, str, UploadOptions]] = []
        self.deleted: list[str] = []
        self.stored_ids: set[str] = set()
        self.upload_error: Exception | None = None
        self.delete_error: Exception | None = None
        self.return_url = True

    @classmethod
    def from_settings(cls) -> 'FakeGateway':
        return cls()

    def upload(
        self,
        data: bytes,
        file_name: str,
        options: UploadOptions,
    ) -> StoredAsset:
        self.uploads.append((data, file_name, options))
        if self.upload_error is not None:
            raise self.upload_error

        file_id = 'file-{0}'.format(len(self.uploads))
        self.stored_ids.add(file_id)
        url = 'https://ik.imagekit.io/demo{0}/{1}'.format(
            options.folder,
            file_name,
        )
        return StoredAsset(
            url=url if self.return_url else '',
            file_id=file_id,
        )

    def delete_file(self, file_id: str) -> None:
        if self.delete_error is not None:
            raise self.delete_error
        if file_id not in self.stored_ids:
            raise LookupError('The requested file does not exist.')
        self.stored_ids.remove(file_id)
        self.deleted.append(file_id)


@pytest.fixture
def fake_gateway():
    """Create an empty fake gateway.

    Returns:
        FakeGateway instance.
    """
    return FakeGateway()


@pytest.fixture
def gateway(fake_gateway, monkeypatch):
    """Serve requests through the fake gateway.

    Returns:
        FakeGateway used by the views.
    """
    monkeypatch.setattr(views, 'get_gateway', lambda: fake_gateway)
    return fake_gateway


@pytest.fixture
def jpeg_file():
    """Small JPEG upload with a filename that needs sanitizing.

    Returns:
        SimpleUploadedFile named 'a b?.jpg'.
    """
    return SimpleUploadedFile(
        'a b?.jpg',
        JPEG_BYTES,
        content_type='image/jpeg',
    )


@pytest.fixture
def text_file():
    """Plain text upload.

    Returns:
        SimpleUploadedFile with text/plain content type.
    """
    return SimpleUploadedFile(
        'notes.txt',
        b'not an image',
        content_type='text/plain',
    )


@pytest.fixture
def mock_s3():
    """Mock S3 service with images bucket.

    Yields:
        boto3 S3 resource with images bucket created.
    """
    with mock_aws():
        # Create S3 resource
        conn = boto3.resource('s3', region_name='us-east-1')

        # Create bucket
        conn.create_bucket(Bucket='images')

        yield conn


@pytest.fixture
def s3_gateway(mock_s3):
    """S3 gateway writing to the mocked bucket.

    Returns:
        S3Gateway with public, non-renaming storage.
    """
    storage = ImageStorage(
        bucket_name='images',
        access_key='testing',
        secret_key='testing',
        region_name='us-east-1',
        file_overwrite=True,
        querystring_auth=False,
    )
    return S3Gateway(storage)
