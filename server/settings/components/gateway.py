"""Image gateway settings: serving, admission and the storage provider."""

from decouple import Csv

from server.settings.components import config

# Server host and port
GATEWAY_HOST = config('HOST', default='0.0.0.0')  # noqa: S104
GATEWAY_PORT = config('PORT', cast=int, default=4000)

# Comma-separated list of browser origins allowed to call the API
ALLOW_ORIGIN = config('ALLOW_ORIGIN', default='http://localhost:3000')

# Dotted path to a `StorageGateway` implementation
IMAGE_GATEWAY_BACKEND = config(
    'IMAGE_GATEWAY_BACKEND',
    default='server.apps.images.infrastructure.gateway.ImageKitGateway',
)

# ImageKit credentials, the private key never leaves the server
IMAGEKIT_PUBLIC_KEY = config('IMAGEKIT_PUBLIC_KEY', default='')
IMAGEKIT_PRIVATE_KEY = config('IMAGEKIT_PRIVATE_KEY', default='')
IMAGEKIT_URL_ENDPOINT = config('IMAGEKIT_URL_ENDPOINT', default='')

# Where uploads land and how they are tagged
IMAGEKIT_FOLDER = config('IMAGEKIT_FOLDER', default='/product-images')
IMAGE_TAGS = config(
    'IMAGE_TAGS',
    cast=Csv(post_process=tuple),
    default='lifcura,product',
)
