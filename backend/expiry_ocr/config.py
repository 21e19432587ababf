"""Application configuration."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # App settings
    app_name: str = "Expiry Label OCR API"
    debug: bool = False
    
    # CORS - Allow all origins for prototype (restrict in production)
    cors_origins: list[str] = ["*"]
    
    # Input limits
    max_text_length: int = 20_000  # A single OCR page is a few KB at most
    max_batch_size: int = 50
    
    # Date validation
    # Dates older than this many days before today are treated as stale
    # (manufacturing dates, old receipts). 1 day absorbs clock/timezone skew.
    past_tolerance_days: int = 1
    
    # Note (free-text hint) selection
    note_max_lines: int = 3
    note_fallback_max_lines: int = 2  # When no food name was found either
    note_min_line_length: int = 2
    note_max_line_length: int = 50  # Longer lines are usually run-on OCR garbage
    note_min_length: int = 3  # Joined note must be longer than this
    note_separator: str = " / "
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
