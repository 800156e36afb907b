"""Configuration management for the report service."""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(default="mongodb://localhost:27017")
    database_name: str = Field(default="appdb")

    # Evidence uploads
    upload_dir: str = Field(default="/tmp/uploads")

    # Summary generation
    summary_backend: Literal["template", "ollama"] = Field(default="template")
    ollama_base_url: str = Field(default="http://localhost:11434")
    llm_model: str = Field(default="gemma2:9b")
    llm_timeout: float = Field(default=60.0)

    # API
    cors_origins: List[str] = Field(default=["*"])
    log_level: str = Field(default="INFO")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
