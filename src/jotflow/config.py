"""
Jotflow Configuration System

Loads configuration from:
1. User config (~/.jotflow/config/jotflow.yaml)
2. Development config (./config/default.yaml)
3. Environment variables (JOTFLOW_ prefix)

Uses Pydantic for validation and type coercion.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DB_PATH = "~/.jotflow/data/jotflow.db"


def expand_path(path: str | Path | None) -> Path | None:
    """Expand ~ and environment variables in paths."""
    if path is None:
        return None
    expanded = os.path.expandvars(os.path.expanduser(str(path)))
    return Path(expanded)


class LogConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "console"] = "json"
    file: Path | None = None

    @field_validator("file", mode="before")
    @classmethod
    def expand_file_path(cls, v: Any) -> Path | None:
        return expand_path(v)


class DatabaseConfig(BaseModel):
    """Database configuration."""

    # validate_default so the default is expanded too
    path: Path = Field(DEFAULT_DB_PATH, validate_default=True)
    echo: bool = False

    @field_validator("path", mode="before")
    @classmethod
    def expand_db_path(cls, v: Any) -> Path:
        return expand_path(v or DEFAULT_DB_PATH)


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    primary_provider: str = "groq"  # groq, claude or openai
    fallback_provider: str | None = None
    claude_model: str = "claude-sonnet-4-20250514"
    openai_model: str = "gpt-4o-mini"
    groq_model: str = "llama-3.1-8b-instant"

    # Falls back to ANTHROPIC_API_KEY / OPENAI_API_KEY / GROQ_API_KEY
    claude_api_key: str | None = None
    openai_api_key: str | None = None
    groq_api_key: str | None = None

    timeout: float = 30.0
    max_retries: int = 2
    retry_delay: float = 1.0

    def model_for(self, provider_name: str) -> str:
        """Model identifier configured for a provider."""
        name = provider_name.lower()
        if name in ("claude", "anthropic"):
            return self.claude_model
        if name == "groq":
            return self.groq_model
        return self.openai_model

    def api_key_for(self, provider_name: str) -> str:
        """API key for a provider, from config or the provider's usual env var."""
        name = provider_name.lower()
        if name in ("claude", "anthropic"):
            return self.claude_api_key or os.getenv("ANTHROPIC_API_KEY", "")
        if name == "groq":
            return self.groq_api_key or os.getenv("GROQ_API_KEY", "")
        return self.openai_api_key or os.getenv("OPENAI_API_KEY", "")


class CallConfig(BaseModel):
    """Sampling settings for one kind of inference call."""

    temperature: float = Field(0.2, ge=0.0, le=2.0)
    max_tokens: int = Field(512, gt=0)


class PipelineConfig(BaseModel):
    """Text-to-record pipeline configuration."""

    timezone: str = "UTC"
    min_confidence: float | None = Field(None, ge=0.0, le=1.0)
    default_due_hour: int = Field(18, ge=0, le=23)

    classify: CallConfig = Field(
        default_factory=lambda: CallConfig(temperature=0.9, max_tokens=512)
    )
    structure: CallConfig = Field(
        default_factory=lambda: CallConfig(temperature=0.1, max_tokens=512)
    )
    categories: CallConfig = Field(
        default_factory=lambda: CallConfig(temperature=0.2, max_tokens=128)
    )
    due_time: CallConfig = Field(
        default_factory=lambda: CallConfig(temperature=0.0, max_tokens=128)
    )
    steps: CallConfig = Field(
        default_factory=lambda: CallConfig(temperature=0.3, max_tokens=512)
    )
    difficulty: CallConfig = Field(
        default_factory=lambda: CallConfig(temperature=0.0, max_tokens=4)
    )

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


class JotflowConfig(BaseSettings):
    """
    Main Jotflow configuration.

    Loads from YAML files and environment variables.
    Environment variables use JOTFLOW_ prefix and __ for nesting.
    Example: JOTFLOW_LOG__LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="JOTFLOW_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    log: LogConfig = Field(default_factory=LogConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # YAML values arrive as init kwargs; environment overrides them
        return env_settings, init_settings, dotenv_settings, file_secret_settings


def find_config_file() -> Path | None:
    """
    Find the configuration file.

    Search order:
    1. ~/.jotflow/config/jotflow.yaml (user config)
    2. ./config/default.yaml (development default)
    """
    user_config = Path.home() / ".jotflow" / "config" / "jotflow.yaml"
    if user_config.exists():
        return user_config

    dev_config = Path.cwd() / "config" / "default.yaml"
    if dev_config.exists():
        return dev_config

    return None


def load_yaml_config(path: Path | None) -> dict[str, Any]:
    """Load configuration from YAML file."""
    if path is None or not path.exists():
        return {}

    with open(path) as f:
        data = yaml.safe_load(f)

    return data if data else {}


def load_config(path: Path | None = None) -> JotflowConfig:
    """
    Load complete configuration.

    Merges:
    1. Pydantic defaults
    2. YAML file configuration
    3. Environment variables (highest priority)
    """
    yaml_config = load_yaml_config(path or find_config_file())
    config = JotflowConfig(**yaml_config)
    config.database.path.parent.mkdir(parents=True, exist_ok=True)
    return config


# Global config instance (lazy-loaded)
_config: JotflowConfig | None = None


def get_config() -> JotflowConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
