"""Prompt API: random prompt and full listing."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.deps import get_store
from app.db.base import RecordStore
from app.schemas.memory import PromptResponse, RandomPromptResponse
from app.services.prompts import pick_random_prompt

router = APIRouter(prefix="/prompts", tags=["prompts"])


@router.get("/random", response_model=RandomPromptResponse)
async def random_prompt(
    store: Annotated[RecordStore, Depends(get_store)],
) -> RandomPromptResponse:
    """One prompt chosen uniformly at random, with its category color. 404 when none exist."""
    return await pick_random_prompt(store)


@router.get("", response_model=list[PromptResponse])
async def list_prompts(
    store: Annotated[RecordStore, Depends(get_store)],
) -> list[PromptResponse]:
    return await store.list_prompts()
