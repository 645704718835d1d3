"""
Product image uploads.

Files are written to ``config.upload_dir`` under a fresh UUID name that
keeps the original extension, and referenced by a URL built from
``config.api_url``.  Replaced images are not cleaned up.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from config.settings import config
from core.errors import ValidationError

logger = logging.getLogger(__name__)


def upload_root() -> Path:
    root = Path(config.upload_dir)
    root.mkdir(parents=True, exist_ok=True)
    return root


def unique_filename(original: Optional[str]) -> str:
    suffix = Path(original or "").suffix.lower()
    return f"{uuid.uuid4()}{suffix}"


async def save_upload(file: Optional[UploadFile]) -> Optional[str]:
    """
    Persist an uploaded image and return its public URL.

    Returns ``None`` when no file (or an empty file part) was sent.
    """
    if file is None or not file.filename:
        return None

    content = await file.read(config.max_upload_bytes + 1)
    if len(content) > config.max_upload_bytes:
        raise ValidationError(
            "Image too large",
            errors=[{"field": "image", "message": f"at most {config.max_upload_bytes} bytes"}],
        )
    if not content:
        return None

    filename = unique_filename(file.filename)
    path = upload_root() / filename
    await asyncio.to_thread(path.write_bytes, content)
    logger.info("Stored upload %s (%d bytes)", filename, len(content))
    return config.upload_url(filename)
