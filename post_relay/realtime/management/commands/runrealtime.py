from __future__ import annotations

import errno
import logging
import socket

import uvicorn
from django.conf import settings
from django.core.management.base import BaseCommand
from django.core.management.base import CommandParser

logger = logging.getLogger(__name__)


def port_in_use(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        try:
            probe.bind((host, port))
        except OSError as exc:
            if exc.errno == errno.EADDRINUSE:
                return True
            raise
    return False


class Command(BaseCommand):
    help = "Serve the Socket.IO post server (and the Django app behind it)"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument("--host", default="0.0.0.0")  # noqa: S104
        parser.add_argument(
            "--port",
            type=int,
            default=None,
            help="Port to listen on (defaults to the PORT setting, 3000).",
        )

    def handle(self, *args, **options) -> str | None:
        host: str = options["host"]
        port: int = options["port"] or settings.PORT

        if port_in_use(host, port):
            logger.warning("port %s already in use", port)
            return None

        logger.info("open for business on %s:%s", host, port)
        uvicorn.run(
            "config.asgi:application",
            host=host,
            port=port,
            log_config=None,
        )
        return None
