from __future__ import annotations

import logging

from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError

from formbuild.errors import RenderError

logger = logging.getLogger(__name__)

# Embedded in every rendered form and never checked on submit. It is a
# placeholder, not a credential.
FORM_TOKEN_PLACEHOLDER = "x.y.z"

SUBMIT_PATH = "/api/submit-form/"
REDIRECT_DELAY_SECONDS = 3


class FormRenderer:
    def __init__(self, templates: Jinja2Templates, domain: str) -> None:
        self._templates = templates
        self._domain = domain.rstrip("/")

    def submit_url(self, form_id: str) -> str:
        return f"{self._domain}{SUBMIT_PATH}{form_id}"

    def _render(self, name: str, **context: object) -> str:
        try:
            return self._templates.get_template(name).render(**context)
        except (TemplateError, OSError) as exc:
            logger.exception("Failed to render %s", name)
            raise RenderError() from exc

    def render(self, form_json: str, submit_url: str, token: str = FORM_TOKEN_PLACEHOLDER) -> str:
        return self._render(
            "form.html",
            data=form_json,
            url=submit_url,
            clientXToken=token,
        )

    def render_redirect(self, referrer: str, delay: int = REDIRECT_DELAY_SECONDS) -> str:
        return self._render("redirect.html", referrer=referrer, delay=delay)
