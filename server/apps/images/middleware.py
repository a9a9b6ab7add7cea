"""Origin admission control (CORS) for the image gateway.

Browsers send ``Origin`` on cross-origin requests. Requests from origins
outside the allow-list are refused before routing; requests without an
origin (non-browser or same-origin) always pass.
"""

import logging
from collections.abc import Callable
from http import HTTPStatus
from typing import Final, final

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.cache import patch_vary_headers

from server.apps.images.exceptions import OriginDeniedError

logger = logging.getLogger(__name__)

ALLOWED_METHODS: Final = ('GET', 'POST', 'DELETE', 'OPTIONS')
ALLOWED_HEADERS: Final = ('Content-Type', 'Authorization')


def parse_allowed_origins(raw_origins: str) -> frozenset[str]:
    """Parse a comma-separated list of origins.

    Args:
        raw_origins: Origins, e.g. 'http://localhost:3000, https://a.com'.

    Returns:
        Set of stripped, non-empty origins.
    """
    return frozenset(
        origin.strip()
        for origin in raw_origins.split(',')
        if origin.strip()
    )


def is_origin_allowed(
    origin: str | None,
    allowed_origins: frozenset[str],
) -> bool:
    """Decide whether a request origin may proceed.

    Matching is exact and case-sensitive on scheme, host and port.

    Args:
        origin: Value of the ``Origin`` header, None if absent.
        allowed_origins: Configured allow-list.

    Returns:
        True for absent origins and listed origins.
    """
    if not origin:
        return True
    return origin in allowed_origins


@final
class OriginAllowListMiddleware:
    """Refuse unknown origins and answer pre-flight requests.

    The allow-list is parsed once, when Django builds the middleware
    chain at startup, and is read-only afterwards.
    """

    def __init__(
        self,
        get_response: Callable[[HttpRequest], HttpResponse],
    ) -> None:
        """Initialize the middleware.

        Args:
            get_response: Next handler in the chain.
        """
        self.get_response = get_response
        self.allowed_origins = parse_allowed_origins(settings.ALLOW_ORIGIN)
        logger.debug('Allowed origins: %s', sorted(self.allowed_origins))

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Apply the allow-list to a request.

        Args:
            request: Incoming request.

        Returns:
            403 for denied origins, 204 for pre-flight requests,
            otherwise the view response with CORS headers added.
        """
        origin = request.headers.get('Origin')

        if not is_origin_allowed(origin, self.allowed_origins):
            error = OriginDeniedError()
            logger.warning(
                'Origin denied: %s %s from %s',
                request.method,
                request.path,
                origin,
            )
            return JsonResponse(
                {'error': error.message},
                status=error.status_code,
            )

        if request.method == 'OPTIONS':
            response = HttpResponse(status=HTTPStatus.NO_CONTENT)
            response['Access-Control-Allow-Methods'] = ','.join(
                ALLOWED_METHODS,
            )
            response['Access-Control-Allow-Headers'] = ','.join(
                ALLOWED_HEADERS,
            )
        else:
            response = self.get_response(request)

        if origin:
            response['Access-Control-Allow-Origin'] = origin
            patch_vary_headers(response, ('Origin',))
        return response
