"""Media validation and type detection for memory uploads."""

import mimetypes
from typing import Literal

from app.config import Settings

# Memories carry pictures, videos or audio narrations
MediaKind = Literal["image", "video", "audio"]

MEDIA_PREFIXES: tuple[MediaKind, ...] = ("image", "video", "audio")

EXT_TO_KIND: dict[str, MediaKind] = {
    ".jpg": "image",
    ".jpeg": "image",
    ".png": "image",
    ".gif": "image",
    ".webp": "image",
    ".heic": "image",
    ".mp4": "video",
    ".webm": "video",
    ".mov": "video",
    ".avi": "video",
    ".mp3": "audio",
    ".m4a": "audio",
    ".wav": "audio",
    ".ogg": "audio",
    ".aac": "audio",
}


def extension_of(filename: str) -> str:
    """Lower-cased extension including the dot, or '' when there is none."""
    name = filename.rsplit("/", 1)[-1].rsplit("\\", 1)[-1]
    if "." not in name.strip("."):
        return ""
    return "." + name.rsplit(".", 1)[-1].lower()


def detect_media_kind(filename: str, content_type: str | None) -> MediaKind | None:
    """Determine the media kind from content_type, falling back to the extension."""
    if content_type:
        base_type = content_type.split(";")[0].strip().lower()
        prefix = base_type.split("/", 1)[0]
        if prefix in MEDIA_PREFIXES:
            return prefix  # type: ignore[return-value]
    ext = extension_of(filename)
    if ext in EXT_TO_KIND:
        return EXT_TO_KIND[ext]
    guessed, _ = mimetypes.guess_type(f"x{ext}") if ext else (None, None)
    if guessed and guessed.split("/", 1)[0] in MEDIA_PREFIXES:
        return guessed.split("/", 1)[0]  # type: ignore[return-value]
    return None


def get_max_size(kind: MediaKind, settings: Settings) -> int:
    return {
        "image": settings.max_file_size_image,
        "video": settings.max_file_size_video,
        "audio": settings.max_file_size_audio,
    }[kind]


def validate_upload(
    filename: str,
    content_type: str | None,
    size: int,
    settings: Settings,
) -> tuple[MediaKind | None, str | None]:
    """
    Validate file and return (media_kind, error_message).
    If valid, error_message is None.
    """
    if size == 0:
        return None, "Uploaded file is empty"
    kind = detect_media_kind(filename, content_type)
    if not kind:
        return None, "Unsupported file type. Allowed: images, videos and audio recordings."
    max_size = get_max_size(kind, settings)
    if size > max_size:
        return kind, f"File too large. Max size for {kind}: {max_size // (1024 * 1024)} MB"
    return kind, None
