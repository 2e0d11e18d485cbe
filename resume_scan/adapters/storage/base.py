"""Analysis repository interface.

Routes and services depend on this abstraction so the PostgreSQL store can be
swapped for the in-process one in local runs and tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from resume_scan.schemas.analysis import AnalysisResult, PersistedAnalysisRecord

MISSING_SKILLS_SEPARATOR = ", "


def join_missing_skills(result: AnalysisResult) -> str:
    """Flatten the keyword list into the stored comma-joined column value."""
    return MISSING_SKILLS_SEPARATOR.join(result.missing_keywords)


class AbstractAnalysisRepository(ABC):
    """Interface for analysis storage backends."""

    async def init_schema(self) -> None:
        """Create backing tables if they do not exist. Must be idempotent."""

    async def close(self) -> None:
        """Release connections held by the repository."""

    @abstractmethod
    async def insert_analysis(self, job_title: str, result: AnalysisResult) -> PersistedAnalysisRecord:
        """Persist one analysis.

        Args:
            job_title: Job title supplied by the caller (already defaulted).
            result: Validated analysis to store.

        Returns:
            The stored record with its generated id and timestamp.

        Raises:
            StorageAppError: If the write fails.
        """
        raise NotImplementedError
