"""JSON Schema validation wrapper producing field-level error detail."""

from __future__ import annotations

from dataclasses import dataclass

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError as _SchemaError

_KIND_BY_VALIDATOR = {
    "required": "missing_required",
    "type": "invalid_type",
    "enum": "enum_violation",
    "pattern": "pattern_mismatch",
    "format": "format_error",
    "minLength": "min_length_violation",
    "maxLength": "max_length_violation",
    "minimum": "minimum_violation",
    "maximum": "maximum_violation",
    "minItems": "min_items_violation",
    "maxItems": "max_items_violation",
    "additionalProperties": "additional_property",
}


@dataclass
class FieldError:
    """One schema violation.

    ``path`` is the dotted location of the offending value (``None`` for the
    document root, e.g. a missing required property).
    """

    kind: str
    message: str
    path: str | None = None
    field: str | None = None
    allowed_values: list[object] | None = None
    hint: str | None = None


_VALIDATORS: dict[int, tuple[dict[str, object], Draft202012Validator]] = {}


def _validator_for(schema: dict[str, object]) -> Draft202012Validator:
    cached = _VALIDATORS.get(id(schema))
    if cached is not None and cached[0] is schema:
        return cached[1]
    validator = Draft202012Validator(schema, format_checker=Draft202012Validator.FORMAT_CHECKER)
    _VALIDATORS[id(schema)] = (schema, validator)
    return validator


def validate_payload(schema: dict[str, object], payload: object) -> list[FieldError]:
    """Validate *payload* against *schema* and return every violation found."""
    validator = _validator_for(schema)
    errors = sorted(
        validator.iter_errors(payload),
        key=lambda e: [str(p) for p in e.absolute_path],
    )
    return [_to_field_error(error) for error in errors]


def _to_field_error(error: _SchemaError) -> FieldError:
    path = ".".join(str(p) for p in error.absolute_path) or None
    kind = _KIND_BY_VALIDATOR.get(str(error.validator), "validation_error")
    field = path
    allowed: list[object] | None = None
    hint: str | None = None

    if error.validator == "required":
        # "'title' is a required property"
        field = error.message.split("'")[1] if "'" in error.message else path
        hint = f"Add the required field '{field}'."
    elif error.validator == "enum":
        allowed = list(error.validator_value)
        hint = "Use one of: " + ", ".join(str(v) for v in allowed)
    elif error.validator == "additionalProperties":
        hint = "Remove the unexpected property or check for typos."
    elif error.validator == "type":
        hint = f"Change the value to type '{error.validator_value}'."
    elif error.validator == "format":
        hint = f"Value must be a valid {error.validator_value}."

    return FieldError(
        kind=kind,
        message=error.message,
        path=path,
        field=field,
        allowed_values=allowed,
        hint=hint,
    )


def format_errors(errors: list[FieldError]) -> dict[str, object]:
    """Group field errors for an API or tool error payload."""
    missing = [e.field for e in errors if e.kind == "missing_required" and e.field]
    invalid = [
        {"path": e.path, "type": e.kind, "reason": e.message}
        for e in errors
        if e.kind != "missing_required"
    ]
    allowed = {e.path: e.allowed_values for e in errors if e.allowed_values and e.path}
    hints = [e.hint for e in errors if e.hint]

    return {
        "missing": missing or None,
        "invalid": invalid or None,
        "allowedValues": allowed or None,
        "hint": " ".join(hints[:3]) if hints else None,
    }
