"""Pydantic schemas for the memory map API."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

Visibility = Literal["private", "public"]


class MemoryFields(BaseModel):
    """Validated form fields of a memory submission (the file travels separately)."""

    memory_name: str = Field(..., min_length=1)
    memory_date: date
    place: str = Field(..., min_length=1)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    description: Optional[str] = None
    visibility: Visibility = "private"
    prompt_id: Optional[int] = None


class NewMemory(MemoryFields):
    """Everything the record store needs to insert a memory."""

    file_url: str
    user_id: str


class MemoryResponse(BaseModel):
    """Memory joined with its prompt text and category color, as returned by list and create."""

    memory_id: int
    memory_name: str
    file_url: str
    description: Optional[str] = None
    memory_date: date
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    user_id: str
    place: str
    visibility: str
    prompt_id: Optional[int] = None
    created_at: Optional[datetime] = None
    prompt_text: Optional[str] = None
    category_color: Optional[str] = None

    model_config = {"from_attributes": True, "frozen": True}


class RandomPromptResponse(BaseModel):
    prompt_id: int
    prompt_text: str
    category_color: Optional[str] = None


class PromptResponse(BaseModel):
    prompt_id: int
    prompt_text: str
    category_id: int
    created_at: datetime


class CategoryResponse(BaseModel):
    category_id: int
    category_name: str
    marker_color: str
