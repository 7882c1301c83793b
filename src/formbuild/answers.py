from __future__ import annotations

import csv
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from filelock import FileLock, Timeout

from formbuild.errors import InvalidFormDataError, MissingParameterError, StorageError
from formbuild.utils import is_blank, is_safe_form_id

logger = logging.getLogger(__name__)

ANSWER_FILE = "form_answer.csv"
RESERVED_KEYS = ("formID", "clientXToken", "referrer")


@dataclass(frozen=True)
class AnswerResult:
    referrer: str
    columns: list[str]


class AnswerRecorder:
    """Appends submitted answers to ``<base_dir>/<form_id>/form_answer.csv``.

    The header row comes from the sorted keys of the first answer. The
    size check, header write and row write run under one file lock per form,
    so concurrent submissions to the same form never write two headers.
    """

    def __init__(self, base_dir: Path, lock_timeout: float = 10.0) -> None:
        self._base_dir = base_dir
        self._lock_timeout = lock_timeout

    def answer_path(self, form_id: str) -> Path:
        if is_blank(form_id):
            raise MissingParameterError()
        if not is_safe_form_id(form_id):
            raise InvalidFormDataError()
        return self._base_dir / form_id / ANSWER_FILE

    def _lock(self, path: Path) -> FileLock:
        return FileLock(f"{path}.lock", timeout=self._lock_timeout)

    def append(self, form_id: str, fields: Mapping[str, str]) -> AnswerResult:
        path = self.answer_path(form_id)

        record = dict(fields)
        referrer = record.pop("referrer", "") or ""
        for key in RESERVED_KEYS:
            record.pop(key, None)
        columns = sorted(record)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with self._lock(path):
                with path.open("a", newline="", encoding="utf-8") as fp:
                    is_new = os.fstat(fp.fileno()).st_size == 0
                    writer = csv.writer(fp, lineterminator="\n")
                    if is_new:
                        writer.writerow(columns)
                    writer.writerow([record[key] for key in columns])
                    fp.flush()
        except Timeout as exc:
            logger.error("Timed out waiting for answer lock on %s", path)
            raise StorageError("Failed to lock answer file") from exc
        except OSError as exc:
            logger.exception("Failed to append answer to %s", path)
            raise StorageError("Failed to write to CSV file") from exc

        logger.info("Answer recorded: %s", form_id)
        return AnswerResult(referrer=referrer, columns=columns)

    def read_answers(self, form_id: str) -> tuple[list[str], list[list[str]]]:
        path = self.answer_path(form_id)
        if not path.is_file():
            return [], []
        try:
            with self._lock(path):
                with path.open("r", newline="", encoding="utf-8") as fp:
                    rows = list(csv.reader(fp))
        except Timeout as exc:
            raise StorageError("Failed to lock answer file") from exc
        except OSError as exc:
            logger.exception("Failed to read answers from %s", path)
            raise StorageError("Failed to read CSV file") from exc
        if not rows:
            return [], []
        return rows[0], rows[1:]
