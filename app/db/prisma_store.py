"""Record store backed by PostgreSQL through Prisma Client Python."""

import logging
from datetime import datetime, timezone
from functools import wraps
from typing import Optional

from prisma import Prisma
from prisma.errors import PrismaError
from prisma.models import Category as PrismaCategory
from prisma.models import Memory as PrismaMemory
from prisma.models import Prompt as PrismaPrompt

from app.core.errors import DataStoreError
from app.db.base import RecordStore
from app.schemas.memory import (
    CategoryResponse,
    MemoryResponse,
    NewMemory,
    PromptResponse,
    RandomPromptResponse,
)

logger = logging.getLogger(__name__)

# Same join for list and single fetch so both return one shape
MEMORY_INCLUDE = {"prompt": {"include": {"category": True}}}


def _wrap_errors(message: str):
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except PrismaError as exc:
                logger.error("%s: %s", message, exc)
                raise DataStoreError(message) from exc

        return wrapper

    return decorator


def _to_response(m: PrismaMemory) -> MemoryResponse:
    """Map Prisma Memory (with prompt and category included) to the API shape."""
    prompt = m.prompt
    category = prompt.category if prompt else None
    return MemoryResponse(
        memory_id=m.id,
        memory_name=m.name,
        file_url=m.fileUrl,
        description=m.description,
        memory_date=m.date.date(),
        latitude=m.latitude,
        longitude=m.longitude,
        user_id=m.userId,
        place=m.place,
        visibility=m.visibility,
        prompt_id=m.promptId,
        created_at=m.createdAt,
        prompt_text=prompt.text if prompt else None,
        category_color=category.markerColor if category else None,
    )


class PrismaRecordStore(RecordStore):
    def __init__(self) -> None:
        self.db = Prisma(auto_register=True)

    async def connect(self) -> None:
        await self.db.connect()

    async def disconnect(self) -> None:
        if self.db.is_connected():
            await self.db.disconnect()

    @_wrap_errors("DB error counting prompts")
    async def count_prompts(self) -> int:
        return await PrismaPrompt.prisma().count()

    @_wrap_errors("DB error fetching random prompt")
    async def prompt_at(self, offset: int) -> Optional[RandomPromptResponse]:
        prompt = await PrismaPrompt.prisma().find_first(
            skip=offset,
            order={"id": "asc"},
            include={"category": True},
        )
        if prompt is None:
            return None
        return RandomPromptResponse(
            prompt_id=prompt.id,
            prompt_text=prompt.text,
            category_color=prompt.category.markerColor if prompt.category else None,
        )

    @_wrap_errors("DB error fetching prompt")
    async def prompt_exists(self, prompt_id: int) -> bool:
        return await PrismaPrompt.prisma().find_unique(where={"id": prompt_id}) is not None

    @_wrap_errors("DB error fetching prompts")
    async def list_prompts(self) -> list[PromptResponse]:
        prompts = await PrismaPrompt.prisma().find_many(order={"createdAt": "desc"})
        return [
            PromptResponse(
                prompt_id=p.id,
                prompt_text=p.text,
                category_id=p.categoryId,
                created_at=p.createdAt,
            )
            for p in prompts
        ]

    @_wrap_errors("DB error fetching categories")
    async def list_categories(self) -> list[CategoryResponse]:
        categories = await PrismaCategory.prisma().find_many(order={"name": "asc"})
        return [
            CategoryResponse(category_id=c.id, category_name=c.name, marker_color=c.markerColor)
            for c in categories
        ]

    @_wrap_errors("DB error inserting memory")
    async def insert_memory(self, memory: NewMemory) -> int:
        data: dict = {
            "name": memory.memory_name,
            "fileUrl": memory.file_url,
            "description": memory.description,
            # DATE column; Prisma takes a datetime
            "date": datetime.combine(memory.memory_date, datetime.min.time(), tzinfo=timezone.utc),
            "latitude": memory.latitude,
            "longitude": memory.longitude,
            "userId": memory.user_id,
            "place": memory.place,
            "visibility": memory.visibility,
        }
        if memory.prompt_id is not None:
            data["promptId"] = memory.prompt_id
        created = await PrismaMemory.prisma().create(data=data)
        return created.id

    @_wrap_errors("DB error fetching memory")
    async def get_memory(self, memory_id: int) -> Optional[MemoryResponse]:
        memory = await PrismaMemory.prisma().find_unique(where={"id": memory_id}, include=MEMORY_INCLUDE)
        return _to_response(memory) if memory else None

    @_wrap_errors("DB error fetching memories")
    async def list_memories(self) -> list[MemoryResponse]:
        memories = await PrismaMemory.prisma().find_many(order={"date": "desc"}, include=MEMORY_INCLUDE)
        return [_to_response(m) for m in memories]
