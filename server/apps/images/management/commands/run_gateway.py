"""Django management command to run the image gateway server."""

import logging
from typing import Any, final, override

from cheroot.wsgi import Server as WSGIServer
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.management.base import BaseCommand, CommandError
from django.core.wsgi import get_wsgi_application

from server.apps.images.infrastructure.gateway import get_gateway

logger = logging.getLogger(__name__)


@final
class Command(BaseCommand):
    """Run the image gateway using cheroot WSGI server."""

    help = 'Run the image upload gateway'

    @override
    def add_arguments(self, parser: Any) -> None:
        """Add command arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--host',
            type=str,
            default=None,
            help='Host to bind to (default: from settings)',
        )
        parser.add_argument(
            '--port',
            type=int,
            default=None,
            help='Port to bind to (default: from settings)',
        )

    @override
    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the command.

        Args:
            args: Positional arguments.
            options: Keyword arguments from command line.

        Raises:
            CommandError: If the storage provider is not configured.
        """
        host = options['host'] or settings.GATEWAY_HOST
        port = options['port'] or settings.GATEWAY_PORT

        # Fail before binding if provider credentials are missing
        try:
            get_gateway()
        except ImproperlyConfigured as error:
            raise CommandError(str(error)) from error

        self.stdout.write(
            self.style.SUCCESS(
                f'Starting image gateway on {host}:{port}',
            ),
        )

        server = WSGIServer(
            bind_addr=(host, port),
            wsgi_app=get_wsgi_application(),
        )

        # Set server name for HTTP headers
        server.server_name = 'ImageGateway'

        try:
            logger.info(
                'Uploader server listening on http://%s:%d',
                host,
                port,
            )
            server.start()
        except KeyboardInterrupt:
            self.stdout.write(self.style.WARNING('\nShutting down...'))
        finally:
            server.stop()
            self.stdout.write(self.style.SUCCESS('Image gateway stopped'))
