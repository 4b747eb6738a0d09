"""Random prompt selection."""

import random
from typing import Optional

from app.core.errors import NotFound
from app.db.base import RecordStore
from app.schemas.memory import RandomPromptResponse

_rng = random.SystemRandom()


async def pick_random_prompt(store: RecordStore, rng: Optional[random.Random] = None) -> RandomPromptResponse:
    """Uniformly random prompt: count, then fetch at a random offset. NotFound when there are none."""
    count = await store.count_prompts()
    if count == 0:
        raise NotFound("No prompts found")
    offset = (rng or _rng).randrange(count)
    prompt = await store.prompt_at(offset)
    if prompt is None:
        # Prompts were removed between count and fetch
        raise NotFound("No prompts found")
    return prompt
