"""Local preview server for the built site.

A thin wrapper around ``http.server`` that serves the output root as plain
static files (GET and HEAD only, ``index.html`` as the directory default).
It is started by the CLI only after a build has completed.
"""

from __future__ import annotations

import logging
from functools import partial
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any

from grafe.config import PREVIEW_HOST, PREVIEW_PORT

logger = logging.getLogger(__name__)


class PreviewRequestHandler(SimpleHTTPRequestHandler):
    """Static file handler that reports requests through ``logging``."""

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        logger.info("%s - %s", self.address_string(), format % args)


def create_server(
    directory: Path, host: str = PREVIEW_HOST, port: int = PREVIEW_PORT
) -> ThreadingHTTPServer:
    """Bind a server that serves ``directory``; the caller runs it."""
    handler = partial(PreviewRequestHandler, directory=str(directory))
    return ThreadingHTTPServer((host, port), handler)


def preview_url(host: str = PREVIEW_HOST, port: int = PREVIEW_PORT) -> str:
    """Return the URL the preview server answers on."""
    return f"http://{host}:{port}/"


def serve(directory: Path, host: str = PREVIEW_HOST, port: int = PREVIEW_PORT) -> None:
    r"""Serve ``directory`` until the process is interrupted.

    Parameters
    ----------
    directory : Path
        Built output root.
    host : str, optional
        Interface to bind; defaults to ``PREVIEW_HOST``.
    port : int, optional
        Port to bind; defaults to ``PREVIEW_PORT``.

    Raises
    ------
    OSError
        If the address is already in use.
    """
    with create_server(directory, host, port) as httpd:
        logger.info("Serving %s at %s", directory, preview_url(host, port))
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            logger.info("Preview server stopped")


__all__ = ["PreviewRequestHandler", "create_server", "preview_url", "serve"]
