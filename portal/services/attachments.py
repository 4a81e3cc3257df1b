from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from portal.core.config import Settings
from portal.core.errors import ValidationFailed

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads"


async def store_attachment(upload: Optional[UploadFile], settings: Settings) -> Optional[str]:
    """
    Save an uploaded file under UPLOAD_DIR and return its public reference.
    No file (or an empty one) means no attachment.
    """
    if upload is None or not upload.filename:
        return None

    limit = settings.max_upload_bytes
    if upload.size is not None and upload.size > limit:
        raise ValidationFailed("The attachment is too large.")

    # never buffer more than one byte past the limit
    data = await upload.read(limit + 1)
    if not data:
        return None

    if upload.content_type not in settings.allowed_attachment_types:
        raise ValidationFailed(f"Unsupported file type: {upload.content_type}")
    if len(data) > limit:
        raise ValidationFailed("The attachment is too large.")

    ext = Path(upload.filename).suffix.lower()
    safe_name = f"{uuid.uuid4().hex}{ext}"

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    out_path = upload_dir / safe_name
    out_path.write_bytes(data)
    logger.info("Stored attachment %s (%d bytes)", safe_name, len(data))

    return f"{PUBLIC_PREFIX}/{safe_name}"


def discard_attachment(attachment_ref: Optional[str], settings: Settings) -> None:
    """Remove a stored attachment that no request ended up referencing."""
    if not attachment_ref or not attachment_ref.startswith(f"{PUBLIC_PREFIX}/"):
        return
    name = Path(attachment_ref).name
    (Path(settings.upload_dir) / name).unlink(missing_ok=True)
    logger.info("Discarded attachment %s", name)
