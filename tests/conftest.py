from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from formbuild.app import create_app
from formbuild.config import Settings

CLIENT_KEY = "api-key-1"


@pytest.fixture
def form_build_dir(tmp_path: Path) -> Path:
    return tmp_path / "form-build"


@pytest.fixture
def settings(form_build_dir: Path) -> Settings:
    return Settings(
        domain="http://forms.test",
        form_build_dir=form_build_dir,
        client_keys=["api-key-1", "api-key-2"],
        csv_lock_timeout=5,
    )


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def sample_form() -> dict:
    return {
        "title": "Contact",
        "fields": [
            {"label": "Name", "type": "text", "name": "name", "placeholder": "Your name"},
            {"label": "Email", "type": "email", "name": "email"},
        ],
    }
