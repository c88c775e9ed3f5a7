import secrets
import time
from pathlib import Path

import structlog
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

logger = structlog.get_logger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}
ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}


class InvalidImage(ValueError):
    pass


class ImageStorage:
    """Images du battlepass écrites sur disque. Les servir est le rôle du serveur web."""

    def __init__(self, upload_dir: str, max_bytes: int, public_prefix: str = "/uploads"):
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes
        self.public_prefix = public_prefix

    def _validate(self, image: UploadFile) -> str:
        ext = Path(image.filename or "").suffix.lower()
        if ext not in ALLOWED_IMAGE_EXTENSIONS or (image.content_type or "") not in ALLOWED_IMAGE_TYPES:
            raise InvalidImage("No image uploaded")
        return ext

    async def save(self, image: UploadFile, prefix: str = "bp") -> str:
        """Enregistre l'image et renvoie son URL publique."""
        ext = self._validate(image)
        data = await image.read(self.max_bytes + 1)
        if not data:
            raise InvalidImage("No image uploaded")
        if len(data) > self.max_bytes:
            raise InvalidImage("Image too large")

        # ex: bp-1718000000000-k3j9x2a{ext}
        filename = f"{prefix}-{int(time.time() * 1000)}-{secrets.token_hex(4)}{ext}"
        await run_in_threadpool(self._write, filename, data)

        logger.info("image uploaded", filename=filename, size=len(data))
        return f"{self.public_prefix}/{filename}"

    def _write(self, filename: str, data: bytes) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        (self.upload_dir / filename).write_bytes(data)
