# Storage backends

from app.config import Settings
from app.storage.base import StorageBackend


def build_storage(settings: Settings) -> StorageBackend:
    """Pick the backend named by STORAGE_BACKEND."""
    if settings.storage_backend == "supabase":
        from app.storage.supabase_storage import SupabaseStorage

        return SupabaseStorage(settings)
    from app.storage.local_storage import LocalStorage

    return LocalStorage(settings)


__all__ = ["build_storage", "StorageBackend"]
