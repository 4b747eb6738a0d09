"""Serve locally stored uploads back byte-for-byte."""

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

from app.config import UPLOADS_PREFIX
from app.core.errors import NotFound
from app.storage.local_storage import LocalStorage

router = APIRouter(tags=["uploads"])


@router.get(UPLOADS_PREFIX + "/{path:path}")
async def serve_upload(path: str, request: Request) -> FileResponse:
    """Content type is inferred from the extension; the bytes are not transformed."""
    storage = request.app.state.storage
    if not isinstance(storage, LocalStorage):
        raise NotFound("File not found")
    try:
        full_path = storage.resolve(path)
    except ValueError:
        raise NotFound("File not found")
    if not full_path.is_file():
        raise NotFound("File not found")
    return FileResponse(full_path)
