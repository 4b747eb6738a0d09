"""Category API."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.deps import get_store
from app.db.base import RecordStore
from app.schemas.memory import CategoryResponse

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    store: Annotated[RecordStore, Depends(get_store)],
) -> list[CategoryResponse]:
    """Categories ordered by name."""
    return await store.list_categories()
