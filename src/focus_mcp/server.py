"""Entrypoint for the Focus MCP server."""

from __future__ import annotations

import logging

import uvicorn

from focus_mcp import __version__
from focus_mcp.config import load_settings
from focus_mcp.logging_utils import configure_logging

logger = logging.getLogger(__name__)


def run_entrypoint() -> None:
    """Serve REST and MCP over HTTP with uvicorn."""
    settings = load_settings()
    configure_logging(settings.logging)
    from focus_mcp.transport.http_server import create_http_app

    logger.info("Initializing Focus MCP server v%s", __version__)
    logger.info("SQLite database: %s", settings.storage.sqlite_path)
    app = create_http_app()
    # MCP over streamable HTTP only; no websocket endpoints.
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        ws="none",
        log_config=None,
    )


if __name__ == "__main__":  # pragma: no cover
    run_entrypoint()
