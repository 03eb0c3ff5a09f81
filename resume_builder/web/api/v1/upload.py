"""Resume file uploads: type check, bounded read, text extraction."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import UploadFile

from ....errors import UnsupportedFileTypeError
from ....extract import SUPPORTED_EXTENSIONS, UNSUPPORTED_MESSAGE, extract_text
from ...errors import APIError

logger = logging.getLogger(__name__)

READ_CHUNK_BYTES = 64 * 1024


async def read_resume_upload(file: UploadFile, max_bytes: int) -> str:
    """Return the extracted text of an uploaded resume.

    The extension is checked before any bytes are read, and reading stops as
    soon as the upload passes *max_bytes*.
    """
    filename = file.filename or ""
    if Path(filename).suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileTypeError(UNSUPPORTED_MESSAGE)

    buffer = bytearray()
    chunk = await file.read(READ_CHUNK_BYTES)
    while chunk:
        buffer.extend(chunk)
        if len(buffer) > max_bytes:
            logger.info("Rejected upload %s: over %d bytes", filename, max_bytes)
            raise APIError(
                422,
                "UPLOAD_TOO_LARGE",
                f"Resume file is larger than {max_bytes} bytes",
                {"max_upload_bytes": max_bytes, "filename": filename},
            )
        chunk = await file.read(READ_CHUNK_BYTES)

    return extract_text(filename, bytes(buffer))
