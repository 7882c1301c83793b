from __future__ import annotations

import csv
import io
from typing import Any

import orjson
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from formbuild.auth import require_client_key
from formbuild.errors import (
    FormNotFoundError,
    FormValidationError,
    InvalidFormDataError,
    MissingParameterError,
    StorageError,
)
from formbuild.schema import validate_form

router = APIRouter(prefix="/api")


@router.post("/save-form", tags=["api/forms"])
async def save_form(request: Request, _: Any = Depends(require_client_key)) -> JSONResponse:
    forms = request.app.state.forms
    try:
        payload = orjson.loads(await request.body())
    except orjson.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Invalid form structure")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid form structure")

    try:
        form = validate_form(payload)
    except FormValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.message)

    try:
        form_id = forms.create_form(form)
    except StorageError as exc:
        raise HTTPException(status_code=500, detail=exc.message)

    return JSONResponse(
        {
            "message": "Form saved successfully",
            "path": str(forms.form_path(form_id)),
            "form_id": form_id,
        }
    )


@router.get("/forms/{form_id}/answers", tags=["api/forms"])
async def export_answers(
    request: Request, form_id: str, _: Any = Depends(require_client_key)
) -> PlainTextResponse:
    answers = request.app.state.answers
    try:
        header, rows = answers.read_answers(form_id)
    except (MissingParameterError, InvalidFormDataError) as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    except StorageError:
        raise HTTPException(status_code=500, detail="Internal Server Error")
    if not header:
        raise HTTPException(status_code=404, detail=FormNotFoundError.message)

    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return PlainTextResponse(
        output.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={form_id}.csv"},
    )
