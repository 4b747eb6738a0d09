"""Application configuration."""

import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

StorageBackendName = Literal["local", "supabase"]

# Prefix under which locally stored uploads are served
UPLOADS_PREFIX = "/uploads"

DEFAULT_MARKER_COLOR = "#007AFF"


class Settings(BaseModel):
    """Process configuration, read once at startup and passed down."""

    # Storage: "local" or "supabase"
    storage_backend: StorageBackendName = "local"
    local_storage_path: Path = Path("uploads")
    # Base URL for serving local files (e.g. http://localhost:3001)
    local_files_base_url: str = ""

    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_bucket: str = "uploads"

    # File size limits (bytes)
    max_file_size_image: int = Field(default=10 * 1024 * 1024, gt=0)  # 10 MB
    max_file_size_video: int = Field(default=50 * 1024 * 1024, gt=0)  # 50 MB
    max_file_size_audio: int = Field(default=20 * 1024 * 1024, gt=0)  # 20 MB

    cors_origins: list[str] = ["*"]

    # Identity is optional; a valid bearer token supplies the user id
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    anonymous_user_id: str = "anonymous"

    # Map client
    api_url: str = "http://localhost:3001"
    mapbox_access_token: str = ""
    default_marker_color: str = DEFAULT_MARKER_COLOR

    log_level: str = "INFO"

    @field_validator("local_storage_path")
    @classmethod
    def _resolve_path(cls, value: Path) -> Path:
        return value.resolve()

    @field_validator("local_files_base_url", "api_url")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.upper()

    @model_validator(mode="after")
    def _check_supabase(self) -> "Settings":
        if self.storage_backend == "supabase" and not (
            self.supabase_url and self.supabase_service_role_key
        ):
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set when STORAGE_BACKEND=supabase"
            )
        return self


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def load_settings(env: dict[str, str] | None = None) -> Settings:
    """Build Settings from the environment (loading .env first when reading os.environ)."""
    if env is None:
        load_dotenv()
        env = dict(os.environ)
    values: dict = {
        "storage_backend": env.get("STORAGE_BACKEND", "local"),
        "local_storage_path": env.get("LOCAL_STORAGE_PATH", "uploads"),
        "local_files_base_url": env.get("LOCAL_FILES_BASE_URL", ""),
        "supabase_url": env.get("SUPABASE_URL", ""),
        "supabase_service_role_key": env.get("SUPABASE_SERVICE_ROLE_KEY", ""),
        "supabase_bucket": env.get("SUPABASE_UPLOAD_BUCKET", "uploads"),
        "jwt_secret": env.get("JWT_SECRET", "change-me-in-production"),
        "jwt_algorithm": env.get("JWT_ALGORITHM", "HS256"),
        "anonymous_user_id": env.get("ANONYMOUS_USER_ID", "anonymous"),
        "api_url": env.get("API_URL", "http://localhost:3001"),
        "mapbox_access_token": env.get("MAPBOX_ACCESS_TOKEN", ""),
        "default_marker_color": env.get("DEFAULT_MARKER_COLOR", DEFAULT_MARKER_COLOR),
        "log_level": env.get("LOG_LEVEL", "INFO"),
    }
    for key in ("MAX_FILE_SIZE_IMAGE", "MAX_FILE_SIZE_VIDEO", "MAX_FILE_SIZE_AUDIO"):
        if env.get(key):
            values[key.lower()] = int(env[key])
    if env.get("CORS_ORIGINS"):
        values["cors_origins"] = _split(env["CORS_ORIGINS"])
    return Settings(**values)
