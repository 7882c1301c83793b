from __future__ import annotations

import logging
from typing import Iterable

from fastapi import HTTPException, Request

from formbuild.errors import AccessDeniedError, InvalidClientKeyError, MissingClientKeyError

logger = logging.getLogger(__name__)

CLIENT_KEY_HEADER = "x-client-key"


class ClientKeyGate:
    """Accepts requests carrying one of a fixed set of client keys."""

    def __init__(self, allowed_keys: Iterable[str]) -> None:
        self._allowed_keys = frozenset(allowed_keys)

    @property
    def allowed_keys(self) -> frozenset[str]:
        return self._allowed_keys

    def authorize(self, header_value: str | None) -> str:
        if not header_value:
            raise MissingClientKeyError()
        if header_value not in self._allowed_keys:
            raise InvalidClientKeyError()
        return header_value


def require_client_key(request: Request) -> str:
    gate: ClientKeyGate = request.app.state.client_key_gate
    try:
        client_key = gate.authorize(request.headers.get(CLIENT_KEY_HEADER))
    except AccessDeniedError as exc:
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.message)
        raise HTTPException(status_code=403, detail=exc.message) from exc
    request.state.client_key = client_key
    return client_key
