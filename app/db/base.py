"""Abstract record store."""

from abc import ABC, abstractmethod
from typing import Optional

from app.schemas.memory import (
    CategoryResponse,
    MemoryResponse,
    NewMemory,
    PromptResponse,
    RandomPromptResponse,
)


class RecordStore(ABC):
    """
    Interface for memories, prompts and categories.
    Implementations raise DataStoreError when the backing database fails.
    Memory reads always return the joined shape (prompt_text, category_color).
    """

    async def connect(self) -> None:
        return None

    async def disconnect(self) -> None:
        return None

    @abstractmethod
    async def count_prompts(self) -> int: ...

    @abstractmethod
    async def prompt_at(self, offset: int) -> Optional[RandomPromptResponse]:
        """Prompt at `offset` in id order, with its category color; None past the end."""
        ...

    @abstractmethod
    async def prompt_exists(self, prompt_id: int) -> bool: ...

    @abstractmethod
    async def list_prompts(self) -> list[PromptResponse]:
        """All prompts, newest created_at first."""
        ...

    @abstractmethod
    async def list_categories(self) -> list[CategoryResponse]:
        """All categories ordered by name."""
        ...

    @abstractmethod
    async def insert_memory(self, memory: NewMemory) -> int:
        """Insert one row and return its generated id."""
        ...

    @abstractmethod
    async def get_memory(self, memory_id: int) -> Optional[MemoryResponse]: ...

    @abstractmethod
    async def list_memories(self) -> list[MemoryResponse]:
        """All memories ordered by memory_date descending."""
        ...
