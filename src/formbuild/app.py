from __future__ import annotations

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from formbuild.answers import AnswerRecorder
from formbuild.auth import ClientKeyGate
from formbuild.config import BASE_DIR, VERSION, Settings, ensure_dirs
from formbuild.render import FormRenderer
from formbuild.repo_files import FormRepo
from formbuild.routes.api import router as api_router
from formbuild.routes.public import router as public_router
from formbuild.routes.system import router as system_router


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    ensure_dirs(settings)

    app = FastAPI(
        title="form builder",
        version=VERSION,
        openapi_tags=[
            {"name": "api/forms", "description": "Form definitions"},
            {"name": "public", "description": "Rendered forms and answers"},
            {"name": "system", "description": "System"},
        ],
    )

    templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

    app.state.settings = settings
    app.state.templates = templates
    app.state.forms = FormRepo(settings.form_build_dir)
    app.state.answers = AnswerRecorder(settings.form_build_dir, settings.csv_lock_timeout)
    app.state.renderer = FormRenderer(templates, settings.domain)
    app.state.client_key_gate = ClientKeyGate(settings.client_keys)

    app.include_router(system_router)
    app.include_router(api_router)
    app.include_router(public_router)

    return app
