"""Application configuration management."""
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings."""

    # Reasoning service configuration
    reasoning_provider: str = Field(
        default="groq",
        description="Reasoning provider: 'groq' or 'openai' (both via the OpenAI-compatible API)"
    )
    groq_api_key: str = Field(default="", description="Groq API key")
    groq_base_url: str = Field(
        default="https://api.groq.com/openai/v1",
        description="Groq OpenAI-compatible endpoint"
    )
    groq_model: str = Field(default="llama-3.3-70b-versatile", description="Groq model name")
    openai_api_key: str = Field(default="", description="OpenAI API key")
    openai_model: str = Field(default="gpt-4o-mini", description="OpenAI model name")
    reasoning_temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=2.0,
        description="Sampling temperature; kept low for consistent structured output"
    )
    reasoning_max_tokens: int = Field(default=4000, description="Maximum completion tokens")
    reasoning_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for a single reasoning-service call"
    )

    # Analysis pipeline
    max_prompt_chars: int = Field(
        default=40000,
        description="Maximum characters of contract text embedded in the prompt"
    )
    min_text_length: int = Field(
        default=10,
        description="Minimum characters of usable text required for analysis"
    )
    extraction_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for text extraction from an uploaded file"
    )

    # Analysis store
    store_capacity: int = Field(default=20, ge=1, description="Number of analyses kept in memory")
    recent_default_limit: int = Field(default=10, ge=1, description="Default size of the recent list")

    # File Upload Configuration
    uploads_directory: str = Field(
        default="./uploads",
        description="Scratch directory for uploaded files (deleted after extraction)"
    )
    max_upload_bytes: int = Field(
        default=15 * 1024 * 1024,
        description="Maximum accepted upload size in bytes"
    )

    # Rate limiting
    rate_limit_enabled: bool = Field(default=True, description="Enable the request rate limiter")
    rate_limit_requests: int = Field(default=20, ge=1, description="Requests allowed per window")
    rate_limit_window_seconds: float = Field(default=60.0, gt=0, description="Rate limit window")

    # Application Configuration
    debug: bool = Field(default=False, description="Debug mode")
    host: str = Field(default="0.0.0.0", description="Host address")
    port: int = Field(default=5000, description="Port number")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Security
    allowed_origins: List[str] = Field(
        default=["*"],
        description="List of allowed origins for CORS"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
