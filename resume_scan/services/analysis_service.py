"""Résumé analysis pipeline.

This service is the core business logic that turns an uploaded résumé and a job
description into a stored, validated analysis. Per request it runs:
- Input checks (document and job description are required)
- Text extraction from the PDF
- Prompt construction with a bounded résumé excerpt
- Model invocation with overload backoff
- Output validation
- One storage write, only after everything above succeeded
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from resume_scan.adapters.storage.base import AbstractAnalysisRepository
from resume_scan.core.config import AppSettings
from resume_scan.core.errors import ValidationAppError
from resume_scan.schemas.analysis import AnalysisResult, PersistedAnalysisRecord
from resume_scan.services.document_service import extract_resume_text
from resume_scan.services.inference_service import InferenceAttempt, ResilientInferenceClient
from resume_scan.services.prompt_builder import build_prompt
from resume_scan.services.result_parser import parse_analysis_result

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisRequest:
    """Inputs of one analysis call; discarded once it completes."""

    document_bytes: bytes | None
    job_description: str | None
    job_title: str | None = None


@dataclass(frozen=True)
class AnalysisOutcome:
    """What a successful analysis hands back to the HTTP layer."""

    record: PersistedAnalysisRecord
    result: AnalysisResult
    attempts: tuple[InferenceAttempt, ...]


class AnalysisService:
    """Runs the extract → prompt → infer → validate → persist pipeline.

    Attributes:
        inference: Model client wrapped in the retry policy.
        repository: Storage backend for successful analyses.
        app_settings: Limits and defaults (résumé budget, page cap, job title).
    """

    def __init__(
        self,
        inference: ResilientInferenceClient,
        repository: AbstractAnalysisRepository,
        app_settings: AppSettings,
    ) -> None:
        self.inference = inference
        self.repository = repository
        self.app_settings = app_settings

    def _validate_request(self, request: AnalysisRequest) -> None:
        """Reject requests missing the document or the job description.

        Raises:
            ValidationAppError: Before any extraction, model call or write happens.
        """
        if not request.document_bytes or not request.job_description or not request.job_description.strip():
            raise ValidationAppError(
                code="missing_input",
                message="Resume and JD required",
                details={
                    "context": {
                        "has_document": bool(request.document_bytes),
                        "has_job_description": bool(
                            request.job_description and request.job_description.strip()
                        ),
                    }
                },
            )

    def _resolve_job_title(self, job_title: str | None) -> str:
        if job_title and job_title.strip():
            return job_title.strip()
        return self.app_settings.default_job_title

    async def analyze(self, request: AnalysisRequest) -> AnalysisOutcome:
        """Analyze a résumé against a job description and store the verdict.

        Args:
            request: Uploaded document, job description and optional title.

        Returns:
            AnalysisOutcome with the stored record and the parsed result.

        Raises:
            ValidationAppError: Document or job description missing.
            ExtractionAppError: Document unreadable or empty.
            CapacityExhaustedError: Model overloaded on every attempt.
            FatalUpstreamError: Model call failed for another reason.
            MalformedResultError: Model output failed validation.
            StorageAppError: The write failed.
        """
        started = time.perf_counter()

        # Step 1: Validate inputs
        self._validate_request(request)
        job_title = self._resolve_job_title(request.job_title)

        logger.info(
            "pipeline.start",
            extra={
                "size_bytes": len(request.document_bytes or b""),
                "job_description_chars": len(request.job_description or ""),
                "job_title": job_title,
            },
        )

        # Step 2: Extract résumé text
        resume_text = await extract_resume_text(
            request.document_bytes or b"",
            max_pages=self.app_settings.max_pdf_pages,
        )

        # Step 3: Build the prompt
        prompt = build_prompt(
            resume_text,
            request.job_description or "",
            max_resume_chars=self.app_settings.max_resume_chars,
        )

        # Step 4: Call the model with backoff
        inference = await self.inference.generate(prompt)

        # Step 5: Validate the output
        result = parse_analysis_result(inference.text)

        # Step 6: Persist
        record = await self.repository.insert_analysis(job_title, result)

        logger.info(
            "pipeline.success",
            extra={
                "analysis_id": record.id,
                "match_score": result.score,
                "missing_count": len(result.missing_keywords),
                "attempts": len(inference.attempts),
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )

        return AnalysisOutcome(record=record, result=result, attempts=inference.attempts)
