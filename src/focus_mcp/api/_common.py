"""Shared plumbing for REST endpoints."""

from __future__ import annotations

import functools
import json
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from focus_mcp.auth.principal import AuthenticatedPrincipal
from focus_mcp.domain.models import DomainValidationError, EntityNotFoundError
from focus_mcp.utils.serialization import json_default

if TYPE_CHECKING:
    from focus_mcp.app import AppContext

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
Endpoint = Callable[[Request], Awaitable[Response]]


class RequestValidationError(Exception):
    def __init__(self, detail: list[dict[str, object]]) -> None:
        super().__init__("Request validation failed")
        self.detail = detail


def app_context(request: Request) -> "AppContext":
    return request.app.state.context


def principal_of(request: Request) -> AuthenticatedPrincipal:
    principal = getattr(request.state, "principal", None)
    if principal is None:
        # ActorAuthMiddleware guards every API route.
        raise RuntimeError("No authenticated principal on request")
    return principal


async def parse_body(request: Request, model: type[ModelT]) -> ModelT:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, ValueError, UnicodeDecodeError) as exc:
        raise RequestValidationError([{"loc": ["body"], "msg": "Invalid JSON"}]) from exc
    return validate_model(model, payload)


def validate_model(model: type[ModelT], data: object) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(
            [
                {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
                for error in exc.errors()
            ]
        ) from exc


def json_ok(payload: object, status_code: int = 200) -> Response:
    body = json.dumps(payload, default=json_default, ensure_ascii=False)
    return Response(content=body, status_code=status_code, media_type="application/json")


def api_endpoint(func: Endpoint) -> Endpoint:
    """Convert domain and validation errors into HTTP error responses."""

    @functools.wraps(func)
    async def wrapper(request: Request) -> Response:
        try:
            return await func(request)
        except RequestValidationError as exc:
            return JSONResponse(
                {"error": "validation_error", "message": str(exc), "detail": exc.detail},
                status_code=400,
            )
        except DomainValidationError as exc:
            return JSONResponse(
                {
                    "error": "validation_error",
                    "message": str(exc),
                    "detail": [{"loc": [exc.field], "msg": str(exc)}],
                },
                status_code=400,
            )
        except EntityNotFoundError as exc:
            return JSONResponse({"error": "not_found", "message": str(exc)}, status_code=404)
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as exc:
            logger.exception("Unhandled error in %s %s", request.method, request.url.path)
            return JSONResponse(
                {"error": "internal_error", "message": str(exc) or type(exc).__name__},
                status_code=500,
            )

    return wrapper
