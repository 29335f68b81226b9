"""
Avatar storage on the local filesystem.

Files land in UPLOADS_DIR as `<epoch-ms>-<random hex>-<original name>` and are
exposed by the auth app under `/uploads`. A name is never reused, so discarding
the file of a rejected request cannot touch an avatar another card points to.
"""

from __future__ import annotations

import io
import os
import re
import secrets
import time
from dataclasses import dataclass

from PIL import Image

from tagwallet.core.errors import ValidationError
from tagwallet.core.logging import get_logger

logger = get_logger(__name__)

MAX_UPLOAD_BYTES = 2 * 1024 * 1024
PUBLIC_PREFIX = "/uploads/"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class AvatarUpload:
    filename: str
    content_type: str
    data: bytes


def safe_filename(filename: str | None) -> str:
    base = os.path.basename((filename or "").replace("\\", "/"))
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned or "avatar"


def validate_image(upload: AvatarUpload) -> None:
    """Reject anything that is not a small, decodable image."""
    if not (upload.content_type or "").lower().startswith("image/"):
        raise ValidationError("Only image files are accepted")
    if not upload.data:
        raise ValidationError("Image is empty")
    if len(upload.data) > MAX_UPLOAD_BYTES:
        raise ValidationError("Image exceeds 2MB")
    try:
        with Image.open(io.BytesIO(upload.data)) as image:
            image.verify()
    except Exception as exc:
        raise ValidationError("Invalid image file") from exc


class AvatarStorage:
    def __init__(self, uploads_dir: str) -> None:
        self.uploads_dir = uploads_dir

    def save(self, upload: AvatarUpload, now_ms: int | None = None) -> str:
        """Validate and write the file, returning its public URL path."""
        validate_image(upload)
        stamp = now_ms if now_ms is not None else int(time.time() * 1000)
        name = safe_filename(upload.filename)
        os.makedirs(self.uploads_dir, exist_ok=True)
        while True:
            filename = f"{stamp}-{secrets.token_hex(4)}-{name}"
            try:
                # "xb" fails instead of overwriting a file another request wrote.
                with open(os.path.join(self.uploads_dir, filename), "xb") as f:
                    f.write(upload.data)
            except FileExistsError:
                continue
            return f"{PUBLIC_PREFIX}{filename}"

    def discard(self, url: str | None) -> None:
        """
        Remove a file written by save() whose record was never persisted.
        Only pass a url returned by save() in the same request.
        """
        if not url or not url.startswith(PUBLIC_PREFIX):
            return
        path = os.path.join(self.uploads_dir, os.path.basename(url))
        try:
            os.remove(path)
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.warning("Could not remove orphan upload %s: %s", path, exc)
