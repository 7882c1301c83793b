from __future__ import annotations

from typing import Any

import orjson
import ulid

from formbuild.config import FORM_ID_PATTERN


def dumps_json(value: Any) -> str:
    return orjson.dumps(value).decode("utf-8")


def dumps_pretty_json(value: Any) -> bytes:
    return orjson.dumps(value, option=orjson.OPT_INDENT_2 | orjson.OPT_APPEND_NEWLINE)


def new_ulid() -> str:
    value = ulid.new()
    return getattr(value, "str", str(value))


def is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def is_safe_form_id(form_id: str) -> bool:
    return bool(FORM_ID_PATTERN.match(form_id))
