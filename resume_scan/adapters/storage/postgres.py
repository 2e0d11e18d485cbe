"""PostgreSQL analysis store backed by an asyncpg connection pool."""

from __future__ import annotations

import logging
import ssl as ssl_lib

import asyncpg

from resume_scan.adapters.storage.base import AbstractAnalysisRepository, join_missing_skills
from resume_scan.core.config import DatabaseSettings
from resume_scan.core.errors import StorageAppError
from resume_scan.schemas.analysis import AnalysisResult, PersistedAnalysisRecord

logger = logging.getLogger(__name__)

CREATE_ANALYSES_TABLE = """
    CREATE TABLE IF NOT EXISTS analyses (
        id SERIAL PRIMARY KEY,
        job_title TEXT,
        match_score INTEGER,
        missing_skills TEXT,
        timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
"""

INSERT_ANALYSIS = """
    INSERT INTO analyses (job_title, match_score, missing_skills)
    VALUES ($1, $2, $3)
    RETURNING id, timestamp
"""


def _unverified_ssl_context() -> ssl_lib.SSLContext:
    """TLS without certificate checks, as hosted Postgres providers expect."""
    context = ssl_lib.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl_lib.CERT_NONE
    return context


class PostgresAnalysisRepository(AbstractAnalysisRepository):
    """Stores analyses in the ``analyses`` table."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    @classmethod
    async def connect(cls, db_settings: DatabaseSettings) -> "PostgresAnalysisRepository":
        """Open a connection pool from settings.

        Args:
            db_settings: Storage section of the application settings.

        Returns:
            Repository owning the new pool.
        """
        pool = await asyncpg.create_pool(
            dsn=db_settings.url,
            min_size=db_settings.min_pool_size,
            max_size=db_settings.max_pool_size,
            ssl=_unverified_ssl_context() if db_settings.ssl else None,
        )
        logger.info(
            "storage.pool_created",
            extra={"min_size": db_settings.min_pool_size, "max_size": db_settings.max_pool_size},
        )
        return cls(pool)

    async def init_schema(self) -> None:
        async with self._pool.acquire() as conn:
            await conn.execute(CREATE_ANALYSES_TABLE)
        logger.info("storage.schema_ready", extra={"table": "analyses"})

    async def close(self) -> None:
        await self._pool.close()
        logger.info("storage.pool_closed")

    async def insert_analysis(self, job_title: str, result: AnalysisResult) -> PersistedAnalysisRecord:
        missing_skills = join_missing_skills(result)
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(INSERT_ANALYSIS, job_title, result.score, missing_skills)
        except (asyncpg.PostgresError, OSError) as exc:
            raise StorageAppError(
                code="storage_insert_failed",
                message="Could not save the analysis",
                details={"context": {"error_type": type(exc).__name__, "error": str(exc)}},
            ) from exc

        record = PersistedAnalysisRecord(
            id=row["id"],
            job_title=job_title,
            match_score=result.score,
            missing_skills=missing_skills,
            timestamp=row["timestamp"],
        )
        logger.info("storage.insert", extra={"analysis_id": record.id, "match_score": record.match_score})
        return record
