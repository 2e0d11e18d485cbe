"""Pydantic schemas for the analysis pipeline and its HTTP responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AnalysisResult(BaseModel):
    """Structured verdict parsed from the model output.

    Field names on the wire follow the JSON contract the prompt asks the model
    for (``missingKeywords``); Python code uses snake_case.
    """

    model_config = ConfigDict(populate_by_name=True)

    score: int = Field(
        ...,
        strict=True,
        ge=0,
        le=100,
        description="Overall match score from 0 to 100. Strings, floats and booleans are rejected.",
    )
    missing_keywords: list[str] = Field(
        ...,
        alias="missingKeywords",
        description="Skills or keywords from the job description absent from the résumé, most important first.",
    )
    advice: str = Field(
        "",
        description="Short summary of how to improve the résumé for this job.",
    )


class PersistedAnalysisRecord(BaseModel):
    """Row written once per successful analysis."""

    id: int
    job_title: str
    match_score: int
    missing_skills: str = Field(
        ...,
        description="Missing keywords joined with ', '.",
    )
    timestamp: datetime


class AnalyzeResponse(BaseModel):
    """Success body for POST /api/analyze."""

    success: bool = True
    id: int = Field(..., description="Identifier of the stored analysis record.")
    data: AnalysisResult


class ErrorResponse(BaseModel):
    """Body returned for every non-2xx response produced by the app."""

    error: str = Field(..., description="Sanitized, caller-facing message.")
    code: str = Field(..., description="Stable machine-readable error code.")
    request_id: str | None = None
