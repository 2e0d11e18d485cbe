"""Shared dependencies for API routes."""

from fastapi import Request

from resume_scan.core.config import Settings
from resume_scan.services.analysis_service import AnalysisService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_analysis_service(request: Request) -> AnalysisService:
    return request.app.state.analysis_service
