from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import orjson

from formbuild.errors import FormNotFoundError, MissingParameterError, StorageError
from formbuild.utils import dumps_pretty_json, is_blank, is_safe_form_id, new_ulid

logger = logging.getLogger(__name__)

FORM_FILE = "form.json"


class FormRepo:
    """Stores each form as ``<base_dir>/<form_id>/form.json``."""

    def __init__(self, base_dir: Path) -> None:
        self._base_dir = base_dir

    def form_dir(self, form_id: str) -> Path:
        if is_blank(form_id):
            raise MissingParameterError()
        if not is_safe_form_id(form_id):
            raise FormNotFoundError()
        return self._base_dir / form_id

    def form_path(self, form_id: str) -> Path:
        return self.form_dir(form_id) / FORM_FILE

    def create_form(self, form: dict[str, Any]) -> str:
        form_id = new_ulid()
        directory = self._base_dir / form_id
        path = directory / FORM_FILE
        try:
            directory.mkdir(parents=True, exist_ok=True)
            path.write_bytes(dumps_pretty_json(form))
        except OSError as exc:
            logger.exception("Failed to write form %s", path)
            raise StorageError("Failed to write form") from exc
        logger.info("Form saved: %s", form_id)
        return form_id

    def get_form(self, form_id: str) -> dict[str, Any]:
        path = self.form_path(form_id)
        if not path.is_file():
            raise FormNotFoundError()
        try:
            form = orjson.loads(path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as exc:
            logger.exception("Failed to load form %s", path)
            raise StorageError("Failed to load form") from exc
        if not isinstance(form, dict):
            raise StorageError("Stored form is not a JSON object")
        return form
