"""Request logging middleware."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..utils.masking import sanitize_log_value

logger = logging.getLogger(__name__)


def get_client_ip(request: Request, trust_forwarded_headers: bool = False) -> str:
    """Get client IP with optional trusted proxy header support."""
    if trust_forwarded_headers:
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return sanitize_log_value(forwarded_for.split(",")[0].strip())
        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return sanitize_log_value(real_ip.strip())
    if request.client:
        return request.client.host
    return "unknown"


class AuditMiddleware(BaseHTTPMiddleware):
    """
    Emit REQUEST_START / REQUEST_END lines for every request.

    Sits outside the auth middleware, so the principal is read from
    ``request.state`` once the inner app has run.
    """

    EXEMPT_PATHS = frozenset({"/health", "/ready"})

    def __init__(
        self,
        app: Callable,
        enabled: bool = True,
        trust_forwarded_headers: bool = False,
    ) -> None:
        super().__init__(app)
        self.enabled = enabled
        self._trust_forwarded_headers = trust_forwarded_headers

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self.enabled or request.url.path in self.EXEMPT_PATHS:
            return await call_next(request)

        request_id = sanitize_log_value(request.headers.get("x-request-id", str(uuid.uuid4())))
        start_time = time.time()
        safe_path = sanitize_log_value(request.url.path)
        safe_ip = get_client_ip(request, trust_forwarded_headers=self._trust_forwarded_headers)

        logger.info(
            "REQUEST_START request_id=%s method=%s path=%s client_ip=%s",
            request_id,
            request.method,
            safe_path,
            safe_ip,
        )

        error_message: str | None = None
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception as exc:
            error_message = sanitize_log_value(type(exc).__name__)
            raise
        finally:
            duration_ms = int((time.time() - start_time) * 1000)
            principal = getattr(request.state, "principal", None)
            user_id = sanitize_log_value(principal.user_id) if principal else "anonymous"
            actor_kind = principal.actor_kind if principal else "-"

            if error_message:
                logger.error(
                    "REQUEST_END request_id=%s user_id=%s actor=%s method=%s path=%s "
                    "status=%s duration_ms=%d error=%s",
                    request_id,
                    user_id,
                    actor_kind,
                    request.method,
                    safe_path,
                    status_code,
                    duration_ms,
                    error_message,
                )
            else:
                logger.info(
                    "REQUEST_END request_id=%s user_id=%s actor=%s method=%s path=%s "
                    "status=%s duration_ms=%d",
                    request_id,
                    user_id,
                    actor_kind,
                    request.method,
                    safe_path,
                    status_code,
                    duration_ms,
                )
