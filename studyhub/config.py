from pydantic_settings import BaseSettings
from typing import Optional, Union
from functools import lru_cache
from pathlib import Path
from pydantic import field_validator, model_validator

# .env lives next to pyproject.toml
PROJECT_ROOT = Path(__file__).parent.parent

__all__ = ["Settings", "settings", "get_settings"]

_TRUTHY = {"true", "1", "yes", "on"}
_FALSY = {"false", "0", "no", "off"}


class Settings(BaseSettings):
    """
    StudyHub service configuration, read from the environment and ``.env``.

    Keys are case-insensitive (``GROQ_API_KEY`` fills ``groq_api_key``).
    """

    # Service
    app_name: str = "StudyHub Course Service"
    environment: str = "development"
    debug: Union[bool, str] = True
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: Union[str, list[str]] = ["*"]

    # Supabase: relational tables and the notes bucket
    supabase_url: Optional[str] = None
    supabase_service_key: Optional[str] = None
    notes_bucket: str = "course-notes"

    # Qdrant: one point per note chunk
    qdrant_url: Optional[str] = None
    qdrant_api_key: Optional[str] = None
    notes_collection: str = "course_note_chunks"

    # Clerk
    clerk_secret_key: Optional[str] = None

    # Groq chat completions (course outlines, quizzes)
    groq_api_key: Optional[str] = None
    groq_model: str = "llama-3.3-70b-versatile"
    groq_timeout: float = 60.0

    # Note embedding
    embedding_model_name: str = "sentence-transformers/all-MiniLM-L6-v2"
    chunk_size: int = 500
    chunk_overlap: int = 100
    max_chunks_per_note: int = 2000

    @field_validator("debug", mode="before")
    @classmethod
    def parse_debug(cls, v):
        """Accept true/false words; unknown strings (e.g. 'WARN') mean development."""
        if isinstance(v, str):
            word = v.lower().strip()
            return word not in _FALSY or word in _TRUTHY
        return bool(v)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, v):
        if not isinstance(v, str):
            return v
        if v.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    @model_validator(mode="after")
    def check_chunking(self):
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("CHUNK_OVERLAP must be smaller than CHUNK_SIZE")
        return self

    class Config:
        env_file = str(PROJECT_ROOT / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Build the settings once and reuse them."""
    return Settings()


settings = get_settings()
