"""Storage adapters for persisted analyses."""

from __future__ import annotations

import logging

from resume_scan.adapters.storage.base import AbstractAnalysisRepository
from resume_scan.adapters.storage.in_memory import InMemoryAnalysisRepository
from resume_scan.adapters.storage.postgres import PostgresAnalysisRepository
from resume_scan.core.config import DatabaseSettings

logger = logging.getLogger(__name__)


async def create_repository(db_settings: DatabaseSettings) -> AbstractAnalysisRepository:
    """Build the repository selected by ``DATABASE_URL``.

    Falls back to the in-process store when no URL is configured.
    """
    if not db_settings.url:
        logger.warning("storage.in_memory", extra={"reason": "DATABASE_URL not set"})
        return InMemoryAnalysisRepository()
    return await PostgresAnalysisRepository.connect(db_settings)


__all__ = [
    "AbstractAnalysisRepository",
    "InMemoryAnalysisRepository",
    "PostgresAnalysisRepository",
    "create_repository",
]
