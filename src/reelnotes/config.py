"""Configuration management for ReelNotes."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="REELNOTES_",
        extra="ignore",
        populate_by_name=True,
    )

    # Completion service (any OpenAI-compatible endpoint, Groq by default)
    llm_api_key: str = Field(alias="GROQ_API_KEY")
    llm_base_url: str = "https://api.groq.com/openai/v1"
    llm_model: str = "llama-3.3-70b-versatile"
    llm_temperature: float = 0.7
    llm_max_tokens: int = 1024
    request_timeout: float = 30.0

    # Content extraction
    rapidapi_key: Optional[str] = Field(default=None, alias="RAPID_API_KEY")
    rapidapi_host: str = "instagram-downloader-v2-scraper-reels-igtv-posts-stories.p.rapidapi.com"
    oembed_url: str = "https://api.instagram.com/oembed/"

    # Storage
    data_dir: Path = Field(default_factory=lambda: Path.cwd() / ".reelnotes")

    @property
    def db_path(self) -> Path:
        return self.data_dir / "reelnotes.db"

    @property
    def error_log_path(self) -> Path:
        return self.data_dir / "error.log"


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
