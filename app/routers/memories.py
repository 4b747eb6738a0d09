"""Memory API: list and create."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.config import Settings
from app.core.auth import get_user_id
from app.core.deps import get_settings, get_storage, get_store
from app.db.base import RecordStore
from app.schemas.memory import MemoryResponse
from app.services.ingestion import UploadedFile, create_memory
from app.storage.base import StorageBackend

router = APIRouter(prefix="/memories", tags=["memories"])


@router.get("", response_model=list[MemoryResponse])
async def list_memories(
    store: Annotated[RecordStore, Depends(get_store)],
) -> list[MemoryResponse]:
    """All memories with prompt_text and category_color, newest memory_date first."""
    return await store.list_memories()


@router.post("", response_model=MemoryResponse, status_code=201)
async def post_memory(
    user_id: Annotated[str, Depends(get_user_id)],
    store: Annotated[RecordStore, Depends(get_store)],
    storage: Annotated[StorageBackend, Depends(get_storage)],
    settings: Annotated[Settings, Depends(get_settings)],
    memory_name: Annotated[Optional[str], Form()] = None,
    memory_date: Annotated[Optional[str], Form()] = None,
    place: Annotated[Optional[str], Form()] = None,
    latitude: Annotated[Optional[str], Form()] = None,
    longitude: Annotated[Optional[str], Form()] = None,
    description: Annotated[Optional[str], Form()] = None,
    visibility: Annotated[Optional[str], Form()] = None,
    prompt_id: Annotated[Optional[str], Form()] = None,
    file: Annotated[Optional[UploadFile], File()] = None,
) -> MemoryResponse:
    """
    Create a memory from a multipart form (file + fields).
    Returns the stored record in the same joined shape as GET /memories.
    """
    form = {
        "memory_name": memory_name,
        "memory_date": memory_date,
        "place": place,
        "latitude": latitude,
        "longitude": longitude,
        "description": description,
        "visibility": visibility,
        "prompt_id": prompt_id,
    }
    upload = None
    if file is not None and file.filename:
        upload = UploadedFile(
            filename=file.filename,
            content=await file.read(),
            content_type=file.content_type,
        )
    return await create_memory(store, storage, settings, form, upload, user_id)
