"""Supabase Storage backend."""

import logging

from supabase import create_client

from app.config import Settings
from app.core.errors import StorageError
from app.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class SupabaseStorage(StorageBackend):
    """Store files in a Supabase Storage bucket. Returns the public URL."""

    def __init__(self, settings: Settings) -> None:
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set when STORAGE_BACKEND=supabase"
            )
        self.client = create_client(settings.supabase_url, settings.supabase_service_role_key)
        self.bucket = settings.supabase_bucket

    async def upload(
        self,
        content: bytes,
        key: str,
        content_type: str | None = None,
    ) -> str:
        opts: dict = {}
        if content_type:
            opts["content-type"] = content_type
        bucket = self.client.storage.from_(self.bucket)
        try:
            bucket.upload(key, content, opts)
        except Exception as exc:
            logger.error("Supabase upload of %s failed: %s", key, exc)
            raise StorageError("Failed to store file") from exc
        return bucket.get_public_url(key)
