"""Upload buffering with a size ceiling."""
from __future__ import annotations

import logging

from fastapi import HTTPException, UploadFile

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


async def read_upload_file_limited(file: UploadFile, max_upload_size_mb: int) -> bytes:
    """Read an uploaded file in chunks, refusing anything over the limit.

    Uses ``file.size`` from the multipart headers when available and enforces
    the limit again while reading.

    Args:
        file: FastAPI upload file instance.
        max_upload_size_mb: Configured ceiling in megabytes.

    Returns:
        File content as bytes.

    Raises:
        HTTPException: 413 if the file exceeds the configured size limit.
    """
    max_bytes = max_upload_size_mb * 1024 * 1024
    too_large = HTTPException(
        status_code=413,
        detail=f"File too large. Maximum size: {max_upload_size_mb}MB",
    )

    declared_size = getattr(file, "size", None)
    if declared_size is not None and declared_size > max_bytes:
        logger.warning(
            "upload.rejected_by_header",
            extra={"file_size": declared_size, "max_bytes": max_bytes},
        )
        raise too_large

    size = 0
    chunks: list[bytes] = []
    while True:
        chunk = await file.read(_CHUNK_SIZE)
        if not chunk:
            break

        size += len(chunk)
        if size > max_bytes:
            logger.warning(
                "upload.rejected_by_chunked_read",
                extra={"size": size, "max_bytes": max_bytes},
            )
            raise too_large
        chunks.append(chunk)

    return b"".join(chunks)
