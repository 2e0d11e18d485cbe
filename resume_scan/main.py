"""ASGI entry point: ``uvicorn resume_scan.main:app``."""

from resume_scan.core.app_factory import create_app

app = create_app()
