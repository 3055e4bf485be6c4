"""
File uploads for employee documents and HR templates.

Files are written under ``settings.UPLOAD_DIR/<kind>/`` with a random prefix;
only the sanitized original name is kept for display.
"""

import logging
import mimetypes
import re
import uuid
from pathlib import Path
from typing import Dict, Optional

from hris.core.config import settings
from hris.core.exceptions import HRISError

logger = logging.getLogger("hris.uploads")

UPLOAD_KINDS = ("documents", "templates")

EXTENSION_MIME_TYPES = {
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
}


class UploadError(HRISError):
    code = "INVALID_UPLOAD"


def sanitize_filename(filename: Optional[str]) -> str:
    """Strip directory parts and unsafe characters from a user supplied name."""
    if not filename:
        return f"unnamed_{uuid.uuid4().hex[:8]}"

    name = Path(filename).name
    name = re.sub(r"[\x00-\x1f\x7f]", "", name)
    name = re.sub(r"[^\w.\-\s]", "_", name)
    name = re.sub(r"[_\s]+", "_", name)
    name = name.lstrip(".")

    if not name or name == "_":
        name = f"unnamed_{uuid.uuid4().hex[:8]}"

    max_length = 200
    if len(name) > max_length:
        stem, _, ext = name.rpartition(".")
        if ext and len(ext) < 10:
            name = stem[:max_length - len(ext) - 1] + "." + ext
        else:
            name = name[:max_length]
    return name


def file_extension(filename: str) -> str:
    return Path(filename).suffix.lower().lstrip(".")


def guess_mime_type(filename: str, declared: Optional[str] = None) -> str:
    if declared and declared != "application/octet-stream":
        return declared
    ext = file_extension(filename)
    return EXTENSION_MIME_TYPES.get(ext) or mimetypes.guess_type(filename)[0] or "application/octet-stream"


def save_upload(
    content: bytes,
    filename: Optional[str],
    kind: str = "documents",
    content_type: Optional[str] = None,
    upload_dir: Optional[Path] = None,
) -> Dict:
    """Validate and store an uploaded file, returning its metadata."""
    if kind not in UPLOAD_KINDS:
        raise UploadError(f"Unknown upload kind '{kind}'")

    safe_name = sanitize_filename(filename)
    ext = file_extension(safe_name)
    allowed = settings.ALLOWED_UPLOAD_EXTENSIONS
    if ext not in allowed:
        raise UploadError(
            f"File type not supported. Allowed: {', '.join(allowed)}",
            code="UNSUPPORTED_FILE_TYPE",
        )
    if not content:
        raise UploadError("Uploaded file is empty", code="EMPTY_FILE")
    if len(content) > settings.MAX_UPLOAD_SIZE_BYTES:
        raise UploadError(
            f"File too large. Maximum size: {settings.MAX_UPLOAD_SIZE_MB}MB",
            code="FILE_TOO_LARGE",
        )

    target_dir = (upload_dir or Path(settings.UPLOAD_DIR)) / kind
    target_dir.mkdir(parents=True, exist_ok=True)
    dest = target_dir / f"{uuid.uuid4().hex}_{safe_name}"
    dest.write_bytes(content)

    logger.info(f"Stored {kind} upload {safe_name} ({len(content)} bytes) at {dest}")
    return {
        "file_path": str(dest),
        "file_name": safe_name,
        "file_size": len(content),
        "mime_type": guess_mime_type(safe_name, content_type),
    }


def is_stored_upload(file_path: str, kind: str = "documents", upload_dir: Optional[Path] = None) -> bool:
    """True when ``file_path`` points inside the upload area for ``kind``."""
    root = ((upload_dir or Path(settings.UPLOAD_DIR)) / kind).resolve()
    try:
        Path(file_path).resolve().relative_to(root)
    except ValueError:
        return False
    return True
