"""Local filesystem storage."""

import logging
from pathlib import Path

import aiofiles

from app.config import UPLOADS_PREFIX, Settings
from app.core.errors import StorageError
from app.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class LocalStorage(StorageBackend):
    """Store files on local disk. fileUrl is a path like /uploads/unique_name."""

    def __init__(self, settings: Settings) -> None:
        self.root = Path(settings.local_storage_path).resolve()
        self.base_url = settings.local_files_base_url

    def resolve(self, key: str) -> Path:
        """Map a key to a path under root. Raises ValueError on path traversal."""
        key = key.replace("..", "").lstrip("/")
        resolved = (self.root / key).resolve()
        if resolved != self.root and self.root not in resolved.parents:
            raise ValueError("Invalid storage key")
        return resolved

    def url_for(self, key: str) -> str:
        return f"{self.base_url}{UPLOADS_PREFIX}/{key}"

    async def upload(
        self,
        content: bytes,
        key: str,
        content_type: str | None = None,
    ) -> str:
        try:
            path = self.resolve(key)
        except ValueError as exc:
            raise StorageError("Invalid storage key") from exc
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "xb") as f:
                await f.write(content)
        except OSError as exc:
            logger.error("Failed to write upload %s: %s", path, exc)
            raise StorageError("Failed to store file") from exc
        logger.debug("Stored %d bytes at %s", len(content), path)
        return self.url_for(key)
