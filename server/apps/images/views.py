"""HTTP endpoints of the image gateway.

Every response is JSON while ``DEBUG`` is off. Gateway errors are
rendered as ``{"error": <message>}`` with the status code the error
carries.
"""

import json
import logging
from collections.abc import Callable, Sequence
from functools import wraps
from http import HTTPStatus
from typing import Any, TypeAlias

from django.conf import settings
from django.http import (
    HttpRequest,
    HttpResponse,
    HttpResponseNotAllowed,
    JsonResponse,
)
from django.views.decorators.http import require_http_methods

from server.apps.images.exceptions import ImageGatewayError
from server.apps.images.infrastructure.gateway import get_gateway
from server.apps.images.infrastructure.intake import read_inbound_file
from server.apps.images.logic import image_operations

logger = logging.getLogger(__name__)

_View: TypeAlias = Callable[..., HttpResponse]


def allow_methods(methods: Sequence[str]) -> Callable[[_View], _View]:
    """Like ``require_http_methods``, but answer 405 with a JSON body.

    Args:
        methods: Accepted HTTP methods.

    Returns:
        View decorator.
    """
    def decorator(view: _View) -> _View:
        guarded = require_http_methods(methods)(view)

        @wraps(view)
        def inner(
            request: HttpRequest,
            *args: Any,
            **kwargs: Any,
        ) -> HttpResponse:
            response = guarded(request, *args, **kwargs)
            if not isinstance(response, HttpResponseNotAllowed):
                return response
            not_allowed = JsonResponse(
                {'error': 'Method not allowed'},
                status=HTTPStatus.METHOD_NOT_ALLOWED,
            )
            not_allowed['Allow'] = response['Allow']
            return not_allowed
        return inner
    return decorator


def _error_response(error: ImageGatewayError) -> JsonResponse:
    if error.status_code < HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.warning('Request rejected: %s', error.message)
    return JsonResponse({'error': error.message}, status=error.status_code)


def _read_json_object(request: HttpRequest) -> dict[str, Any]:
    """Decode a JSON object body; anything else reads as empty."""
    try:
        payload = json.loads(request.body or b'{}')
    except ValueError:
        logger.debug('Ignoring malformed JSON body')
        return {}
    return payload if isinstance(payload, dict) else {}


@allow_methods(['GET'])
def index(request: HttpRequest) -> JsonResponse:
    """Describe the service and its endpoints."""
    return JsonResponse({
        'ok': True,
        'message': 'Image uploader server is running.',
        'endpoints': {
            'health': '/health',
            'upload': 'POST /upload (multipart/form-data, field name: file)',
        },
    })


@allow_methods(['GET'])
def health(request: HttpRequest) -> JsonResponse:
    """Liveness probe."""
    return JsonResponse({'ok': True})


@allow_methods(['POST'])
def upload(request: HttpRequest) -> JsonResponse:
    """Upload one image from the ``file`` field of a multipart body.

    Returns:
        ``{"url", "fileId"}`` of the stored image.
    """
    try:
        inbound = read_inbound_file(request)
        asset = image_operations.upload_image(
            inbound,
            get_gateway(),
            folder=settings.IMAGEKIT_FOLDER,
            tags=settings.IMAGE_TAGS,
        )
    except ImageGatewayError as error:
        return _error_response(error)
    return JsonResponse({'url': asset.url, 'fileId': asset.file_id})


@allow_methods(['DELETE'])
def delete_image(request: HttpRequest) -> JsonResponse:
    """Delete an image by the ``fileId`` of a JSON body.

    Returns:
        ``{"ok": true}`` once the provider deleted the file.
    """
    payload = _read_json_object(request)
    try:
        image_operations.delete_image(payload.get('fileId'), get_gateway())
    except ImageGatewayError as error:
        return _error_response(error)
    return JsonResponse({'ok': True})


def not_found(request: HttpRequest, exception: Exception) -> JsonResponse:
    """JSON replacement for Django's 404 page."""
    return JsonResponse(
        {'error': 'Not found'},
        status=HTTPStatus.NOT_FOUND,
    )


def server_error(request: HttpRequest) -> JsonResponse:
    """JSON replacement for Django's 500 page."""
    return JsonResponse(
        {'error': 'Server error'},
        status=HTTPStatus.INTERNAL_SERVER_ERROR,
    )


def bad_request(request: HttpRequest, exception: Exception) -> JsonResponse:
    """JSON replacement for Django's 400 page."""
    return JsonResponse(
        {'error': 'Bad request'},
        status=HTTPStatus.BAD_REQUEST,
    )
