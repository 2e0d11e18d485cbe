from __future__ import annotations

from resume_scan.api.routes.analyze import router as analyze_router
from resume_scan.api.routes.health import router as health_router
from resume_scan.api.routes.index import router as index_router

__all__ = ["analyze_router", "health_router", "index_router"]
