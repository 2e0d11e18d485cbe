"""In-process analysis store.

Notes:
- Per-process only: records vanish on restart and are not shared between workers.
- Inserts happen without an await in between, so no lock is needed on the event loop.
"""

from __future__ import annotations

import itertools
from datetime import datetime
from typing import Callable

from resume_scan.adapters.storage.base import AbstractAnalysisRepository, join_missing_skills
from resume_scan.schemas.analysis import AnalysisResult, PersistedAnalysisRecord


class InMemoryAnalysisRepository(AbstractAnalysisRepository):
    """Keeps analyses in a list, assigning sequential ids from 1."""

    def __init__(self, *, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock
        self._ids = itertools.count(1)
        self.records: list[PersistedAnalysisRecord] = []

    async def insert_analysis(self, job_title: str, result: AnalysisResult) -> PersistedAnalysisRecord:
        record = PersistedAnalysisRecord(
            id=next(self._ids),
            job_title=job_title,
            match_score=result.score,
            missing_skills=join_missing_skills(result),
            timestamp=self._clock(),
        )
        self.records.append(record)
        return record
