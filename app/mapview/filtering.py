"""Client-side free-text filter over already-fetched pins."""

from typing import Iterable

from app.schemas.memory import MemoryResponse


def matches(pin: MemoryResponse, text: str) -> bool:
    """Case-insensitive substring match on name, description, prompt text or place. Empty text matches all."""
    needle = text.lower()
    if not needle:
        return True
    return any(
        needle in (value or "").lower()
        for value in (pin.memory_name, pin.description, pin.prompt_text, pin.place)
    )


def visible_pins(pins: Iterable[MemoryResponse], text: str) -> list[MemoryResponse]:
    return [pin for pin in pins if matches(pin, text)]
