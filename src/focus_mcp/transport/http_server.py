"""Starlette HTTP server assembly."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from focus_mcp import __version__
from focus_mcp.api import actions as actions_api
from focus_mcp.api import entities as entities_api
from focus_mcp.api import tokens as tokens_api
from focus_mcp.app import AppContext, get_app_context
from focus_mcp.auth.middleware import ActorAuthMiddleware
from focus_mcp.middleware.audit import AuditMiddleware

logger = logging.getLogger(__name__)

MCP_PATH = "/mcp"


def create_http_app(context: AppContext | None = None) -> Starlette:
    """Create the HTTP application serving REST and MCP."""
    ctx = context or get_app_context()
    settings = ctx.settings

    # Order: CORS -> request logging -> auth. CORS must be outermost so that
    # preflight requests get CORS headers before auth can reject them.
    middleware: list[Middleware] = [
        Middleware(
            AuditMiddleware,
            enabled=settings.auth.audit_enabled,
            trust_forwarded_headers=settings.server.http_trust_forwarded_headers,
        ),
        Middleware(ActorAuthMiddleware, resolver=ctx.resolver, mcp_path=MCP_PATH),
    ]

    if settings.server.http_enable_cors and settings.server.http_allowed_origins:
        from starlette.middleware.cors import CORSMiddleware

        middleware.insert(
            0,
            Middleware(
                CORSMiddleware,
                allow_origins=list(settings.server.http_allowed_origins),
                allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
                allow_headers=[
                    "Authorization",
                    "Content-Type",
                    "Accept",
                    "MCP-Protocol-Version",
                    "Mcp-Session-Id",
                ],
                expose_headers=["Mcp-Session-Id", "MCP-Protocol-Version"],
                allow_credentials=True,
            ),
        )

    async def mcp_handler(request: Request) -> Response:
        return await ctx.router.handle_request(request)

    async def health_handler(request: Request) -> Response:
        return JSONResponse({"status": "healthy", "version": __version__})

    async def ready_handler(request: Request) -> Response:
        return JSONResponse(
            {
                "status": "ready",
                "recorder": ctx.recorder.stats.to_dict(),
                "sessions": len(ctx.router),
            }
        )

    routes = [
        Route(
            MCP_PATH,
            endpoint=mcp_handler,
            methods=["POST", "GET", "DELETE", "OPTIONS"],
        ),
        Route("/health", endpoint=health_handler, methods=["GET"]),
        Route("/ready", endpoint=ready_handler, methods=["GET"]),
        *actions_api.routes,
        *tokens_api.routes,
        *entities_api.routes,
    ]

    @asynccontextmanager
    async def lifespan(app: Starlette):
        logger.info("Starting Focus HTTP server...")
        reaper = asyncio.create_task(
            ctx.router.run_reaper(settings.sessions.sweep_interval_seconds),
            name="mcp-session-reaper",
        )
        logger.info("Focus HTTP server started")
        try:
            yield
        finally:
            logger.info("Stopping Focus HTTP server...")
            reaper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await reaper
            ctx.router.close_all()
            await ctx.recorder.close()

    app = Starlette(
        routes=routes,
        middleware=middleware,
        lifespan=lifespan,
    )
    app.state.context = ctx
    return app
