from __future__ import annotations

from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from resume_scan.api.dependencies import get_settings
from resume_scan.core.config import Settings

router = APIRouter(tags=["Static"])


@router.get("/", include_in_schema=False)
def index(settings: Annotated[Settings, Depends(get_settings)]) -> FileResponse:
    """Serve the front-end page from the working directory."""
    path = Path.cwd() / settings.app.index_file
    if not path.is_file():
        raise HTTPException(status_code=404, detail="Not Found")
    return FileResponse(path, media_type="text/html")
