"""Django storage configuration for the S3-compatible gateway backend.

Only used when `IMAGE_GATEWAY_BACKEND` points at `S3Gateway`.
Works with any S3-compatible service:
- MinIO for local development
- Cloudflare R2 or AWS S3 in production
"""

from typing import Any, Final

from server.settings.components import config

STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': {
        'BACKEND': 'server.apps.images.infrastructure.storage.ImageStorage',
        'OPTIONS': {
            'bucket_name': config('AWS_STORAGE_BUCKET_NAME', default=''),
            'access_key': config('AWS_ACCESS_KEY_ID', default=''),
            'secret_key': config('AWS_SECRET_ACCESS_KEY', default=''),
            'endpoint_url': config(
                'AWS_S3_ENDPOINT_URL',
                default=None,
            ),
            'region_name': config(
                'AWS_S3_REGION_NAME',
                default='auto',
            ),
            'custom_domain': config('AWS_S3_CUSTOM_DOMAIN', default=None),
            'file_overwrite': True,  # Keys are already unique, never rename
            'querystring_auth': False,  # Public, unsigned URLs
            'default_acl': None,  # Inherit bucket ACL
        },
    },
}
