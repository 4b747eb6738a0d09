"""Request-scoped access to the objects built at startup."""

from fastapi import Request

from app.config import Settings
from app.db.base import RecordStore
from app.storage.base import StorageBackend


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_storage(request: Request) -> StorageBackend:
    return request.app.state.storage
