"""Content sniffing for uploaded documents."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

PDF_SIGNATURE = b"%PDF-"

# Some generators prepend junk before the header; PDF readers accept it
# within the first kilobyte.
_SIGNATURE_SEARCH_WINDOW = 1024


def looks_like_pdf(data: bytes) -> bool:
    """Check the PDF magic number to catch non-PDF uploads early.

    Args:
        data: File content as bytes.

    Returns:
        True if the ``%PDF-`` header is present near the start of the file.
    """
    if PDF_SIGNATURE in data[:_SIGNATURE_SEARCH_WINDOW]:
        return True

    logger.warning(
        "file_signature.invalid",
        extra={"expected_type": "pdf", "actual_prefix": data[:10] if data else "EMPTY"},
    )
    return False
