"""Abstract storage backend."""

import time
import uuid
from abc import ABC, abstractmethod

from app.core.upload_validation import extension_of


class StorageBackend(ABC):
    """Interface for media storage (local or cloud). Contract: durable write, then a stable URL."""

    @abstractmethod
    async def upload(
        self,
        content: bytes,
        key: str,
        content_type: str | None = None,
    ) -> str:
        """
        Store file and return a URL or path used to reference it.
        Raises StorageError when the write fails.
        """
        ...

    def unique_key(self, filename: str, field: str = "file") -> str:
        """Build a collision-free key: field-<ns time>-<random hex><ext>, keeping the original extension."""
        ext = "".join(c for c in extension_of(filename)[1:] if c.isalnum())[:16]
        suffix = f".{ext}" if ext else ""
        return f"{field}-{time.time_ns()}-{uuid.uuid4().hex[:12]}{suffix}"
