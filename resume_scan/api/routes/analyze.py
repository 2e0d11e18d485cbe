from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile

from resume_scan.api.dependencies import get_analysis_service, get_settings
from resume_scan.core.config import Settings
from resume_scan.core.file_validation import read_upload_file_limited
from resume_scan.schemas.analysis import AnalyzeResponse, ErrorResponse
from resume_scan.services.analysis_service import AnalysisRequest, AnalysisService

router = APIRouter(tags=["Analysis"])


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Résumé or job description missing"},
        500: {"model": ErrorResponse, "description": "Analysis failed"},
        503: {"model": ErrorResponse, "description": "Model overloaded, try again later"},
    },
)
async def analyze_resume(
    service: Annotated[AnalysisService, Depends(get_analysis_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    resume: UploadFile | None = File(None, description="Résumé in PDF format"),
    job_description: str | None = Form(
        None,
        alias="jobDescription",
        description="Job description text to compare the résumé against.",
    ),
    job_title: str | None = Form(
        None,
        alias="jobTitle",
        description="Job title stored with the analysis (defaults to 'Unknown Role').",
    ),
) -> AnalyzeResponse:
    """Score a résumé against a job description.

    Missing fields are reported as 400 by the pipeline itself rather than as
    FastAPI 422 validation errors, so the contract stays 400/500/503.

    Returns:
        AnalyzeResponse: ``{success, id, data: {score, missingKeywords, advice}}``.
    """
    document_bytes = None
    if resume is not None:
        document_bytes = await read_upload_file_limited(
            resume, settings.app.max_upload_size_mb
        )

    outcome = await service.analyze(
        AnalysisRequest(
            document_bytes=document_bytes,
            job_description=job_description,
            job_title=job_title,
        )
    )
    return AnalyzeResponse(success=True, id=outcome.record.id, data=outcome.result)
