"""Configuration management - settings from env, static data from YAML."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8000, description="Bind port")

    # LLM (OpenAI-compatible)
    llm_base_url: str | None = Field(default=None, description="OpenAI-compatible API base URL")
    llm_api_key: str = Field(default="", description="API key for LLM provider")
    llm_model: str = Field(default="gpt-4o-mini", description="Model name")
    llm_max_tokens: int = Field(default=2048, description="Completion token ceiling for a week plan")

    # Cron
    cron_secret: str = Field(default="", description="Bearer token expected on cron requests")
    batch_size: int = Field(
        default=12,
        ge=1,
        description="Users generated per invocation; sized to the upstream ~12 calls/minute quota",
    )
    candidate_limit: int = Field(default=1000, ge=1, description="Onboarded users fetched per invocation")
    history_lookback: int = Field(default=5, ge=1, description="Prior weekly plans read per user")
    week_start_day: int = Field(default=0, ge=0, le=6, description="Week start weekday, 0 = Monday")

    # Generation
    generation_timeout_seconds: float = Field(default=30.0, gt=0, description="Per-attempt LLM timeout")
    generation_max_retries: int = Field(default=2, ge=0, description="Retries on transient LLM failures")
    generation_backoff_seconds: float = Field(default=1.0, ge=0, description="Base for exponential backoff")

    # Data
    data_dir: Path = Field(default=Path("data"), description="Directory for JSON persistence")
    redis_url: str | None = Field(default=None, description="Redis URL for cloud persistence (e.g. Upstash)")


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load YAML config file."""
    if not config_path.exists():
        return {}
    with config_path.open() as f:
        return yaml.safe_load(f) or {}


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


@lru_cache
def get_cuisine_catalog(config_dir_str: str = "") -> dict[str, Any]:
    """Load the cuisine -> dishes catalog from config."""
    if not config_dir_str:
        config_dir = Path(__file__).parent.parent.parent / "config"
    else:
        config_dir = Path(config_dir_str)
    return load_yaml_config(config_dir / "cuisines.yaml")
