from __future__ import annotations

from typing import Any, Iterable

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError

from formbuild.config import FIELD_TYPES, NAME_PATTERN
from formbuild.errors import FormValidationError

NOT_EMPTY = r"\S"

FIELD_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["label", "type", "name"],
    "properties": {
        "label": {
            "type": "string",
            "pattern": NOT_EMPTY,
            "x-message": "label is required",
        },
        "type": {
            "type": "string",
            "enum": list(FIELD_TYPES),
            "x-message": f"type must be one of {', '.join(FIELD_TYPES)}",
        },
        "name": {
            "type": "string",
            "pattern": NAME_PATTERN.pattern,
            "x-message": "name must contain only letters and digits",
        },
        "placeholder": {"type": "string"},
    },
}

FORM_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["title", "fields"],
    "properties": {
        "title": {
            "type": "string",
            "pattern": NOT_EMPTY,
            "x-message": "title is required",
        },
        "fields": {
            "type": "array",
            "minItems": 1,
            "items": FIELD_SCHEMA,
            "x-message": "at least one field is required",
        },
    },
}

_VALIDATOR = Draft7Validator(FORM_SCHEMA)


def _location(path: Iterable[Any]) -> str:
    loc = ""
    for part in path:
        if isinstance(part, int):
            loc += f"[{part}]"
        else:
            loc += f".{part}" if loc else str(part)
    return loc or "form"


def _describe(error: ValidationError) -> str:
    loc = _location(error.absolute_path)
    if error.validator in {"pattern", "enum", "minItems"}:
        custom = error.schema.get("x-message")
        if custom:
            return f"{loc}: {custom}"
    if error.validator == "type":
        return f"{loc}: must be of type {error.validator_value}"
    return f"{loc}: {error.message}"


def form_errors(payload: Any) -> list[str]:
    errors = sorted(
        _VALIDATOR.iter_errors(payload),
        key=lambda err: [(isinstance(part, str), part) for part in err.absolute_path],
    )
    return [_describe(error) for error in errors]


def normalize_form(payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "title": payload["title"],
        "fields": [
            {
                "label": field["label"],
                "type": field["type"],
                "name": field["name"],
                "placeholder": field.get("placeholder") or "",
            }
            for field in payload["fields"]
        ],
    }


def validate_form(payload: Any) -> dict[str, Any]:
    """Check a form payload and return its normalized copy.

    Every violation is collected; a form with any invalid field is rejected
    as a whole with :class:`FormValidationError`.
    """
    errors = form_errors(payload)
    if errors:
        raise FormValidationError(errors)
    return normalize_form(payload)
