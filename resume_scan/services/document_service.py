"""Résumé text extraction.

Turns uploaded document bytes into plain text. Extraction failures are
deterministic, so nothing here is retried.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging

from resume_scan.core.errors import ExtractionAppError
from resume_scan.utils.file_validators import looks_like_pdf
from resume_scan.utils.pdf_extractor import extract_text_from_pdf_bytes

logger = logging.getLogger(__name__)


async def extract_resume_text(raw_bytes: bytes, *, max_pages: int) -> str:
    """Extract plain text from a PDF résumé.

    Parsing runs in the default thread pool so a large document does not stall
    other requests on the event loop.

    Args:
        raw_bytes: Uploaded document content.
        max_pages: Page ceiling passed to the PDF extractor.

    Returns:
        str: Extracted text, stripped of surrounding whitespace.

    Raises:
        ExtractionAppError: If the document is not a readable PDF or holds no text.
    """
    size_bytes = len(raw_bytes)
    logger.info("extract.start", extra={"size_bytes": size_bytes, "file_type": "pdf"})

    if not looks_like_pdf(raw_bytes):
        raise ExtractionAppError(
            code="extraction_not_pdf",
            message="Uploaded document is not a PDF.",
            details={"file_type": "pdf"},
        )

    loop = asyncio.get_running_loop()
    try:
        text, meta = await loop.run_in_executor(
            None, extract_text_from_pdf_bytes, raw_bytes, max_pages
        )
    except ValueError as exc:
        logger.warning("extract.failed", extra={"error": str(exc)})
        raise ExtractionAppError(
            code="extraction_failed",
            message="Could not read the uploaded PDF.",
            details={"file_type": "pdf", "context": {"error": str(exc)}},
        ) from exc
    except Exception as exc:
        # pypdf raises a wide range of exceptions on damaged files
        logger.warning(
            "extract.failed",
            extra={"error": str(exc), "error_type": type(exc).__name__},
        )
        raise ExtractionAppError(
            code="extraction_failed",
            message="Could not read the uploaded PDF.",
            details={"file_type": "pdf", "context": {"error_type": type(exc).__name__}},
        ) from exc

    if not text:
        logger.warning("extract.no_text", extra={"meta": meta})
        raise ExtractionAppError(
            code="extraction_no_text",
            message="No text could be extracted. The PDF may be image-based (OCR is not supported).",
            details={"file_type": "pdf", "context": meta},
        )

    logger.info(
        "extract.success",
        extra={
            "char_count": len(text),
            "resume_text_hash": hashlib.sha256(text.encode()).hexdigest()[:16],
            "meta": meta,
        },
    )
    return text
