"""Pytest configuration and fixtures."""

from datetime import datetime, timezone
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.core.errors import DataStoreError
from app.db.base import RecordStore
from app.main import create_app
from app.schemas.memory import (
    CategoryResponse,
    MemoryResponse,
    NewMemory,
    PromptResponse,
    RandomPromptResponse,
)
from app.storage.local_storage import LocalStorage

# Smallest JPEG header plus payload; only the bytes matter to storage
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00" + b"\x00" * 64 + b"\xff\xd9"


class InMemoryRecordStore(RecordStore):
    """Dict-backed store with the same ordering and join shape as the Postgres store."""

    def __init__(self) -> None:
        self.categories: dict[int, CategoryResponse] = {}
        self.prompts: dict[int, PromptResponse] = {}
        self.memories: dict[int, NewMemory] = {}
        self.created: dict[int, datetime] = {}
        self.fail_inserts = False

    def add_category(self, category_id: int, name: str, color: str) -> CategoryResponse:
        category = CategoryResponse(category_id=category_id, category_name=name, marker_color=color)
        self.categories[category_id] = category
        return category

    def add_prompt(self, prompt_id: int, text: str, category_id: int, created_at: datetime) -> PromptResponse:
        prompt = PromptResponse(
            prompt_id=prompt_id, prompt_text=text, category_id=category_id, created_at=created_at
        )
        self.prompts[prompt_id] = prompt
        return prompt

    async def count_prompts(self) -> int:
        return len(self.prompts)

    async def prompt_at(self, offset: int) -> Optional[RandomPromptResponse]:
        ordered = sorted(self.prompts.values(), key=lambda p: p.prompt_id)
        if offset >= len(ordered):
            return None
        prompt = ordered[offset]
        return RandomPromptResponse(
            prompt_id=prompt.prompt_id,
            prompt_text=prompt.prompt_text,
            category_color=self.categories[prompt.category_id].marker_color,
        )

    async def prompt_exists(self, prompt_id: int) -> bool:
        return prompt_id in self.prompts

    async def list_prompts(self) -> list[PromptResponse]:
        return sorted(self.prompts.values(), key=lambda p: p.created_at, reverse=True)

    async def list_categories(self) -> list[CategoryResponse]:
        return sorted(self.categories.values(), key=lambda c: c.category_name)

    async def insert_memory(self, memory: NewMemory) -> int:
        if self.fail_inserts:
            raise DataStoreError("DB error inserting memory")
        memory_id = len(self.memories) + 1
        self.memories[memory_id] = memory
        self.created[memory_id] = datetime(2024, 6, 1, 12, 0, memory_id, tzinfo=timezone.utc)
        return memory_id

    def _joined(self, memory_id: int) -> MemoryResponse:
        memory = self.memories[memory_id]
        prompt = self.prompts.get(memory.prompt_id) if memory.prompt_id is not None else None
        category = self.categories.get(prompt.category_id) if prompt else None
        return MemoryResponse(
            memory_id=memory_id,
            created_at=self.created[memory_id],
            prompt_text=prompt.prompt_text if prompt else None,
            category_color=category.marker_color if category else None,
            **memory.model_dump(),
        )

    async def get_memory(self, memory_id: int) -> Optional[MemoryResponse]:
        if memory_id not in self.memories:
            return None
        return self._joined(memory_id)

    async def list_memories(self) -> list[MemoryResponse]:
        rows = [self._joined(memory_id) for memory_id in self.memories]
        return sorted(rows, key=lambda m: m.memory_date, reverse=True)


@pytest.fixture
def settings(tmp_path):
    return Settings(local_storage_path=tmp_path / "uploads", jwt_secret="test-secret")


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def seeded_store(store):
    store.add_category(1, "Nature", "#2ECC71")
    store.add_category(2, "Family", "#E74C3C")
    store.add_prompt(1, "Where did you feel most at peace?", 1, datetime(2024, 1, 1, tzinfo=timezone.utc))
    store.add_prompt(2, "A place you shared with someone you love", 2, datetime(2024, 2, 1, tzinfo=timezone.utc))
    store.add_prompt(3, "The first trip you remember", 2, datetime(2024, 3, 1, tzinfo=timezone.utc))
    return store


@pytest.fixture
def storage(settings):
    return LocalStorage(settings)


@pytest.fixture
def client(settings, seeded_store, storage):
    app = create_app(settings=settings, store=seeded_store, storage=storage)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def jpeg_bytes():
    return JPEG_BYTES


@pytest.fixture
def sunset_form():
    return {
        "memory_name": "Sunset",
        "memory_date": "2024-05-01",
        "place": "Golden Gate Bridge",
        "latitude": "37.8199",
        "longitude": "-122.4783",
        "visibility": "public",
    }
