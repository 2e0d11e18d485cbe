from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from resume_scan.api.dependencies import get_settings
from resume_scan.core.config import Settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(settings: Annotated[Settings, Depends(get_settings)]) -> dict:
    """Liveness probe; reports which model backs the analysis endpoint."""
    return {
        "status": "ok",
        "llm_provider": settings.llm.provider,
        "llm_model": settings.llm.model,
    }
