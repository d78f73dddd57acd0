from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from uploads import DEFAULT_MAX_SIZE


class Settings(BaseSettings):
    """Application settings"""

    # App configuration
    app_name: str = "Logo Style Guide"
    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=8000)
    log_level: str = Field(default="INFO")
    cors_origins: list[str] = Field(default=["*"])

    # Text extraction
    openai_api_key: Optional[str] = Field(default=None)
    openai_model: str = Field(default="gpt-4o-mini")
    openai_timeout: Optional[float] = Field(default=None)  # None keeps the client default

    # Uploads
    max_upload_bytes: int = Field(default=DEFAULT_MAX_SIZE)

    model_config = {"env_file": ".env", "case_sensitive": False, "extra": "ignore", "env_file_encoding": "utf-8"}


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get settings instance (for dependency injection)"""
    return settings
