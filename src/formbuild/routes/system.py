from __future__ import annotations

from fastapi import APIRouter

from formbuild.config import VERSION

router = APIRouter()


@router.get("/", tags=["system"])
async def index() -> dict[str, str]:
    return {"message": "form builder", "version": VERSION}


@router.get("/healthz", tags=["system"])
async def healthz() -> dict[str, str]:
    return {"status": "ok"}
