"""Application factory for the FastAPI app.

Builds every pipeline component from one Settings object and wires them onto
``app.state``. Components never read configuration on their own.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from resume_scan import __version__
from resume_scan.adapters.llm.base import AbstractLLMClient
from resume_scan.adapters.llm.factory import create_llm_client
from resume_scan.adapters.storage import AbstractAnalysisRepository, create_repository
from resume_scan.api.routes import analyze_router, health_router, index_router
from resume_scan.core.config import Settings, load_settings
from resume_scan.core.exception_handlers import setup_exception_handlers
from resume_scan.core.logging import configure_logging
from resume_scan.core.middleware import request_id_middleware
from resume_scan.services.analysis_service import AnalysisService
from resume_scan.services.inference_service import ResilientInferenceClient

logger = logging.getLogger(__name__)


async def _prepare_repository(settings: Settings) -> AbstractAnalysisRepository:
    # With the default min_pool_size of 0 no connection is opened here, so an
    # unreachable database first shows up in init_schema below
    repository = await create_repository(settings.database)
    try:
        await repository.init_schema()
    except Exception as exc:
        # The server still starts; inserts will fail and surface as 500s
        logger.error(
            "storage.schema_failed",
            extra={"error_type": type(exc).__name__, "error": str(exc)},
        )
    return repository


def create_app(
    settings: Settings | None = None,
    *,
    llm_client: AbstractLLMClient | None = None,
    repository: AbstractAnalysisRepository | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        settings: Configuration; read from the environment when omitted.
        llm_client: Prebuilt model client (tests inject stubs here).
        repository: Prebuilt storage backend (tests inject stubs here).

    Returns:
        Configured app with middleware, handlers and routers.
    """
    settings = settings or load_settings()

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        client = llm_client or create_llm_client(settings.llm)
        store = repository or await _prepare_repository(settings)

        inference = ResilientInferenceClient.from_settings(client, settings.retry)
        app.state.analysis_service = AnalysisService(
            inference=inference,
            repository=store,
            app_settings=settings.app,
        )
        logger.info(
            "app.started",
            extra={
                "llm_provider": client.provider,
                "llm_model": client.model,
                "storage": type(store).__name__,
                "max_attempts": settings.retry.max_attempts,
            },
        )
        try:
            yield
        finally:
            if repository is None:
                await store.close()
            logger.info("app.stopped")

    app = FastAPI(
        title="Resume Scan API",
        description=(
            "Scores a PDF résumé against a job description with a generative AI "
            "model and stores the verdict: match score, missing keywords, advice."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(analyze_router, prefix="/api")
    app.include_router(health_router)
    app.include_router(index_router)

    return app
