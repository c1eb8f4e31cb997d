"""Shared helpers for the tool modules."""

from __future__ import annotations

from collections.abc import Mapping


def to_updates(arguments: Mapping[str, object], fields: Mapping[str, str]) -> dict[str, object]:
    """Translate camelCase tool arguments into storage field names.

    Keys absent from *arguments* are left out; explicit ``None`` is kept so
    that nullable fields can be cleared.
    """
    return {fields[key]: value for key, value in arguments.items() if key in fields}
