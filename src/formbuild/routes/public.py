from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

from formbuild.errors import (
    FormNotFoundError,
    InvalidFormDataError,
    MissingParameterError,
    RenderError,
    StorageError,
)
from formbuild.render import FORM_TOKEN_PLACEHOLDER
from formbuild.utils import dumps_json, is_blank

router = APIRouter(prefix="/api")


@router.get("/get-form/{form_id}", response_class=HTMLResponse, tags=["public"])
async def get_form(request: Request, form_id: str) -> HTMLResponse:
    forms = request.app.state.forms
    renderer = request.app.state.renderer
    try:
        form = forms.get_form(form_id)
        html = renderer.render(
            dumps_json(form), renderer.submit_url(form_id), FORM_TOKEN_PLACEHOLDER
        )
    except MissingParameterError as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    except FormNotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)
    except (StorageError, RenderError):
        raise HTTPException(status_code=500, detail="Internal Server Error")
    return HTMLResponse(html)


@router.post("/submit-form/{form_id}", response_class=HTMLResponse, tags=["public"])
async def submit_form(request: Request, form_id: str) -> HTMLResponse:
    answers = request.app.state.answers
    renderer = request.app.state.renderer

    form_data = await request.form()
    fields: dict[str, str] = {}
    for key in form_data.keys():
        value = form_data.get(key)
        if not isinstance(value, str):
            raise HTTPException(status_code=400, detail=InvalidFormDataError.message)
        fields[key] = value

    submitted_id = fields.get("formID", "")
    if is_blank(submitted_id) or submitted_id != form_id:
        raise HTTPException(status_code=400, detail=InvalidFormDataError.message)

    # TODO: verify clientXToken once rendered forms carry a real per-form token.
    try:
        result = answers.append(submitted_id, fields)
        html = renderer.render_redirect(result.referrer)
    except (MissingParameterError, InvalidFormDataError) as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    except (StorageError, RenderError):
        raise HTTPException(status_code=500, detail="Internal Server Error")
    return HTMLResponse(html)
