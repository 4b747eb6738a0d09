"""Memory ingestion: validate, store the file, insert the row, re-read the joined record."""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from app.config import Settings
from app.core.errors import DataStoreError, ValidationError
from app.core.upload_validation import validate_upload
from app.db.base import RecordStore
from app.schemas.memory import MemoryFields, MemoryResponse, NewMemory
from app.storage.base import StorageBackend

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("memory_name", "memory_date", "place")
OPTIONAL_FIELDS = ("latitude", "longitude", "description", "visibility", "prompt_id")

# What browsers send for a FormData field appended with null/undefined
_EMPTY_MARKERS = ("", "null", "undefined")


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    content: bytes
    content_type: Optional[str] = None


def _blank(value: Optional[str]) -> bool:
    return value is None or value.strip() in _EMPTY_MARKERS


def parse_memory_fields(form: Mapping[str, Optional[str]]) -> MemoryFields:
    """
    Turn raw form values into MemoryFields.
    Required fields must be present and non-blank; blank optional fields become None
    (latitude/longitude included, so a memory without coordinates is accepted).
    """
    for name in REQUIRED_FIELDS:
        value = form.get(name)
        if value is None or not value.strip():
            raise ValidationError(f"Missing required field: {name}")
    data: dict = {name: form[name].strip() for name in REQUIRED_FIELDS}  # type: ignore[union-attr]
    for name in OPTIONAL_FIELDS:
        value = form.get(name)
        if not _blank(value):
            data[name] = value.strip()  # type: ignore[union-attr]
    try:
        return MemoryFields(**data)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(p) for p in first["loc"])
        raise ValidationError(f"Invalid field {field}: {first['msg']}") from exc


async def create_memory(
    store: RecordStore,
    storage: StorageBackend,
    settings: Settings,
    form: Mapping[str, Optional[str]],
    upload: Optional[UploadedFile],
    user_id: str,
) -> MemoryResponse:
    """
    Create one memory. Nothing is written unless every field and the file validate;
    the file is stored before the row is inserted, so no row ever lacks its file.
    Not idempotent: resubmitting creates a second memory.
    """
    fields = parse_memory_fields(form)
    if upload is None or not upload.filename:
        raise ValidationError("Missing file")
    _, err = validate_upload(upload.filename, upload.content_type, len(upload.content), settings)
    if err:
        raise ValidationError(err)
    if fields.prompt_id is not None and not await store.prompt_exists(fields.prompt_id):
        raise ValidationError(f"Unknown prompt_id: {fields.prompt_id}")

    key = storage.unique_key(upload.filename)
    file_url = await storage.upload(upload.content, key, content_type=upload.content_type)
    logger.info("Stored upload %s as %s", upload.filename, file_url)

    new_memory = NewMemory(**fields.model_dump(), file_url=file_url, user_id=user_id)
    try:
        memory_id = await store.insert_memory(new_memory)
    except DataStoreError:
        logger.warning("Insert failed; stored file %s is left orphaned", file_url)
        raise

    memory = await store.get_memory(memory_id)
    if memory is None:
        raise DataStoreError("DB error fetching inserted memory")
    logger.info("Created memory %s (%s) for user %s", memory.memory_id, memory.memory_name, user_id)
    return memory
