"""Configuration Management."""

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _deploy_timeout_from_env() -> float:
    """SF_DEPLOY_TIMEOUT_MS is in milliseconds; unset or invalid falls back to 5 minutes."""
    raw = os.getenv("SF_DEPLOY_TIMEOUT_MS", "")
    try:
        value = float(raw)
    except ValueError:
        return 300.0
    return value / 1000 if value > 0 else 300.0


class Settings(BaseSettings):
    """Application settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="FORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Server
    host: str = Field(default="127.0.0.1", description="HTTP bind address")
    port: int = Field(default=3001, gt=0, description="HTTP port")
    cors_origin: str = Field(default="http://localhost:3000", description="Allowed CORS origin")

    # Artifact store
    preview_dir: Path = Field(
        default_factory=lambda: Path.cwd() / "src" / "modules" / "gen" / "preview",
        description="Directory holding preview.html/js/css",
    )

    # Generation
    openai_api_key: str = Field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY", ""), description="OpenAI API key"
    )
    openai_model: str = Field(default="gpt-4.1-mini", description="Default OpenAI model")
    gemini_api_key: str = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY", ""), description="Gemini API key"
    )
    gemini_model: str = Field(default="gemini-2.5-flash", description="Default Gemini model")
    generation_temperature: float = Field(default=0.2, ge=0.0, le=2.0, description="Model temperature")
    max_history_content: int = Field(default=8000, gt=0, description="Per-message history clip")

    # Salesforce
    sf_login_url: str = Field(
        default_factory=lambda: os.getenv("SF_LOGIN_URL", "https://login.salesforce.com"),
        description="Salesforce login URL",
    )
    sf_api_version: str = Field(
        default_factory=lambda: os.getenv("SF_API_VERSION", "60.0"),
        description="Metadata API version",
    )
    deploy_timeout: float = Field(
        default_factory=_deploy_timeout_from_env, gt=0, description="Deploy poll deadline (seconds)"
    )
    deploy_poll_interval: float = Field(default=5.0, gt=0, description="Deploy poll interval (seconds)")
    http_timeout: float = Field(default=30.0, gt=0, description="Remote request timeout")

    # Component rules
    light_dom: bool = Field(default=True, description="Inject light DOM render mode")
    bundle_name_lowercase: bool = Field(
        default=True, description="Require bundle names to start with a lowercase letter"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
