"""Tests for storage gateways."""

import base64
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from django.core.exceptions import ImproperlyConfigured

from server.apps.images.infrastructure.gateway import (
    ImageKitGateway,
    S3Gateway,
    StoredAsset,
    UploadOptions,
    get_gateway,
)

_IMAGEKIT_BACKEND = 'server.apps.images.infrastructure.gateway.ImageKitGateway'
_S3_BACKEND = 'server.apps.images.infrastructure.gateway.S3Gateway'


@pytest.fixture
def imagekit_client():
    """Mock ImageKit SDK client.

    Returns:
        MagicMock standing in for imagekitio.ImageKit.
    """
    client = MagicMock()
    client.upload_file.return_value = SimpleNamespace(
        url='https://ik.imagekit.io/demo/product-images/key.jpg',
        file_id='65f1c0ffee',
    )
    return client


@pytest.fixture
def imagekit_settings(settings):
    """Configure ImageKit credentials.

    Returns:
        Django settings with ImageKit configured.
    """
    settings.IMAGE_GATEWAY_BACKEND = _IMAGEKIT_BACKEND
    settings.IMAGEKIT_PUBLIC_KEY = 'public_test'
    settings.IMAGEKIT_PRIVATE_KEY = 'private_test'
    settings.IMAGEKIT_URL_ENDPOINT = 'https://ik.imagekit.io/demo'
    return settings


class TestImageKitGateway:
    """Tests for ImageKitGateway."""

    def test_upload_sends_options(self, imagekit_client):
        """Test upload call: content, name, folder, tags and flags."""
        gateway = ImageKitGateway(imagekit_client)

        asset = gateway.upload(
            b'\xff\xd8\xff',
            'key.jpg',
            UploadOptions(folder='/product-images', tags=('a', 'b')),
        )

        assert asset == StoredAsset(
            url='https://ik.imagekit.io/demo/product-images/key.jpg',
            file_id='65f1c0ffee',
        )
        call_kwargs = imagekit_client.upload_file.call_args.kwargs
        assert base64.b64decode(call_kwargs['file']) == b'\xff\xd8\xff'
        assert call_kwargs['file_name'] == 'key.jpg'
        options = call_kwargs['options']
        assert options.folder == '/product-images'
        assert options.tags == ['a', 'b']
        assert options.use_unique_file_name is False
        assert options.is_private_file is False

    def test_upload_without_url(self, imagekit_client):
        """Test that a missing URL comes back empty."""
        imagekit_client.upload_file.return_value = SimpleNamespace(
            url=None,
            file_id=None,
        )
        gateway = ImageKitGateway(imagekit_client)

        asset = gateway.upload(b'x', 'key.jpg', UploadOptions(folder='/'))

        assert asset == StoredAsset(url='', file_id='')

    def test_upload_error_propagates(self, imagekit_client):
        """Test that SDK errors are not swallowed."""
        imagekit_client.upload_file.side_effect = RuntimeError('Bad key')
        gateway = ImageKitGateway(imagekit_client)

        with pytest.raises(RuntimeError, match='Bad key'):
            gateway.upload(b'x', 'key.jpg', UploadOptions(folder='/'))

    def test_delete_file(self, imagekit_client):
        """Test delete call by file ID."""
        gateway = ImageKitGateway(imagekit_client)

        gateway.delete_file('65f1c0ffee')

        imagekit_client.delete_file.assert_called_once_with(
            file_id='65f1c0ffee',
        )

    def test_from_settings(self, imagekit_settings):
        """Test building the gateway from settings."""
        gateway = ImageKitGateway.from_settings()

        assert isinstance(gateway, ImageKitGateway)

    @pytest.mark.parametrize('setting_name', [
        'IMAGEKIT_PUBLIC_KEY',
        'IMAGEKIT_PRIVATE_KEY',
        'IMAGEKIT_URL_ENDPOINT',
    ])
    def test_from_settings_missing_credentials(
        self,
        imagekit_settings,
        setting_name,
    ):
        """Test that every credential is required."""
        setattr(imagekit_settings, setting_name, '')

        with pytest.raises(ImproperlyConfigured, match=setting_name):
            ImageKitGateway.from_settings()


class TestS3Gateway:
    """Tests for S3Gateway."""

    def test_upload_stores_object(self, s3_gateway, mock_s3):
        """Test that the object lands under folder/key with tags."""
        asset = s3_gateway.upload(
            b'\xff\xd8\xff',
            '1-abc-photo.jpg',
            UploadOptions(folder='/product-images', tags=('a', 'b')),
        )

        assert asset.file_id == 'product-images/1-abc-photo.jpg'
        assert asset.url.endswith('/product-images/1-abc-photo.jpg')
        assert '?' not in asset.url

        stored = mock_s3.Object('images', asset.file_id).get()
        assert stored['Body'].read() == b'\xff\xd8\xff'
        assert stored['ContentType'] == 'image/jpeg'
        assert stored['Metadata'] == {'tags': 'a,b'}

    def test_upload_without_folder(self, s3_gateway):
        """Test that an empty folder stores at the bucket root."""
        asset = s3_gateway.upload(b'x', 'photo.png', UploadOptions(folder='/'))

        assert asset.file_id == 'photo.png'

    def test_upload_does_not_rename(self, s3_gateway, mock_s3):
        """Test that an existing key is overwritten, not renamed."""
        options = UploadOptions(folder='imgs')
        s3_gateway.upload(b'old', 'photo.png', options)

        asset = s3_gateway.upload(b'new', 'photo.png', options)

        assert asset.file_id == 'imgs/photo.png'
        stored = mock_s3.Object('images', 'imgs/photo.png').get()
        assert stored['Body'].read() == b'new'

    @pytest.mark.parametrize('options', [
        UploadOptions(folder='imgs', use_unique_file_name=True),
        UploadOptions(folder='imgs', is_private_file=True),
    ])
    def test_upload_rejects_unsupported_options(self, s3_gateway, options):
        """Test that renaming and private files are refused."""
        with pytest.raises(ValueError, match='public files'):
            s3_gateway.upload(b'x', 'photo.png', options)

    def test_delete_file(self, s3_gateway, mock_s3):
        """Test deleting an uploaded object."""
        asset = s3_gateway.upload(b'x', 'photo.png', UploadOptions(folder='i'))

        s3_gateway.delete_file(asset.file_id)

        bucket = mock_s3.Bucket('images')
        assert asset.file_id not in [obj.key for obj in bucket.objects.all()]

    def test_delete_twice_fails(self, s3_gateway):
        """Test that deleting an already deleted object raises."""
        asset = s3_gateway.upload(b'x', 'photo.png', UploadOptions(folder='i'))
        s3_gateway.delete_file(asset.file_id)

        with pytest.raises(FileNotFoundError, match='i/photo.png'):
            s3_gateway.delete_file(asset.file_id)

    def test_from_settings_missing_bucket(self):
        """Test that default settings lack S3 credentials."""
        with pytest.raises(ImproperlyConfigured, match='bucket_name'):
            S3Gateway.from_settings()

    def test_from_settings(self, settings, mock_s3):
        """Test building the gateway from STORAGES."""
        settings.STORAGES = {
            'default': {
                'BACKEND': (
                    'server.apps.images.infrastructure.storage.ImageStorage'
                ),
                'OPTIONS': {
                    'bucket_name': 'images',
                    'access_key': 'testing',
                    'secret_key': 'testing',
                    'region_name': 'us-east-1',
                    'file_overwrite': True,
                    'querystring_auth': False,
                },
            },
        }

        gateway = S3Gateway.from_settings()

        asset = gateway.upload(b'x', 'photo.png', UploadOptions(folder='i'))
        assert asset.file_id == 'i/photo.png'


class TestGetGateway:
    """Tests for get_gateway."""

    def test_builds_configured_backend(self, imagekit_settings):
        """Test that the backend setting picks the class."""
        assert isinstance(get_gateway(), ImageKitGateway)

    def test_caches_instance(self, imagekit_settings):
        """Test that the gateway is built once."""
        assert get_gateway() is get_gateway()

    def test_settings_change_resets_cache(self, imagekit_settings):
        """Test that changing credentials rebuilds the gateway."""
        first = get_gateway()

        imagekit_settings.IMAGEKIT_PRIVATE_KEY = 'rotated'

        assert get_gateway() is not first

    def test_missing_credentials(self, settings):
        """Test that an unconfigured provider refuses to start."""
        settings.IMAGE_GATEWAY_BACKEND = _IMAGEKIT_BACKEND
        settings.IMAGEKIT_PUBLIC_KEY = ''

        with pytest.raises(ImproperlyConfigured):
            get_gateway()

    def test_s3_backend(self, settings):
        """Test selecting the S3 backend without credentials."""
        settings.IMAGE_GATEWAY_BACKEND = _S3_BACKEND

        with pytest.raises(ImproperlyConfigured, match='S3'):
            get_gateway()
