"""Tool dispatch: validate, invoke, and wrap the outcome in a result envelope."""

from __future__ import annotations

import json
import logging

from focus_mcp.auth.principal import AuthenticatedPrincipal
from focus_mcp.domain.models import DomainValidationError, EntityNotFoundError
from focus_mcp.mcp_runtime import ToolResult, ToolSpec
from focus_mcp.utils.jsonschema import format_errors, validate_payload
from focus_mcp.utils.masking import redact_sensitive_fields
from focus_mcp.utils.serialization import json_default

logger = logging.getLogger(__name__)


def result_from_payload(payload: dict[str, object], is_error: bool = False) -> ToolResult:
    text = json.dumps(payload, ensure_ascii=False, indent=2, default=json_default)
    content = [{"type": "text", "text": text}]
    return ToolResult(content=content, structured_content=payload, is_error=is_error)


def success_result(data: object) -> ToolResult:
    return result_from_payload({"success": True, "data": data})


def error_result(
    error: str,
    message: str,
    details: dict[str, object] | None = None,
) -> ToolResult:
    payload: dict[str, object] = {"success": False, "error": error, "message": message}
    if details:
        payload["details"] = details
    return result_from_payload(payload, is_error=True)


async def dispatch_tool(
    spec: ToolSpec,
    arguments: dict[str, object],
    principal: AuthenticatedPrincipal,
) -> ToolResult:
    """Run one tool call for *principal*. Failures come back as error results."""
    errors = validate_payload(spec.input_schema, arguments)
    if errors:
        message = "Input validation failed: " + "; ".join(e.message for e in errors[:5])
        logger.info("Rejected %s arguments: %s", spec.name, message)
        return error_result("validation_error", message, details=format_errors(errors))

    logger.info(
        "Tool call %s by %s:%s args=%s",
        spec.name,
        principal.actor_kind,
        principal.user_id,
        redact_sensitive_fields(arguments),
    )
    try:
        data = await spec.handler(arguments, principal)
    except EntityNotFoundError as exc:
        return error_result("not_found", str(exc))
    except DomainValidationError as exc:
        return error_result(
            "validation_error",
            str(exc),
            details={"invalid": [{"path": exc.field, "type": "invalid_value", "reason": str(exc)}]},
        )
    except (KeyboardInterrupt, SystemExit):
        raise
    except Exception as exc:
        logger.exception("Tool handler error: %s", spec.name)
        return error_result("internal_error", str(exc) or type(exc).__name__)
    return success_result(data)
