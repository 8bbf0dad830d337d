"""Application configuration with pydantic-settings + TOML."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict, TomlConfigSettingsSource

from yogaflow.models.enums import UnmatchedPosePolicy


def _default_config_dir() -> Path:
    return Path.home() / ".yogaflow"


def _default_database_url() -> str:
    return f"sqlite:///{_default_config_dir() / 'yogaflow.db'}"


class LLMSettings(BaseSettings):
    """Hosted text generation API configuration."""

    provider: Literal["openai", "mock"] = "openai"
    api_key: str = ""
    base_url: str = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4000, gt=0)
    cue_max_tokens: int = Field(default=500, gt=0)
    timeout: float = Field(default=60.0, gt=0)


class DatabaseSettings(BaseSettings):
    """Backing store configuration."""

    url: str = Field(default_factory=_default_database_url)
    echo: bool = False


class GenerationSettings(BaseSettings):
    """Default generation parameters."""

    prompt_pose_limit: int = Field(default=50, gt=0)
    min_fallback_poses: int = Field(default=6, gt=0)
    unmatched_pose_policy: UnmatchedPosePolicy = UnmatchedPosePolicy.FIRST_IN_CATALOG
    coalesce_ttl_seconds: float = Field(default=5.0, ge=0)
    guidelines_path: Path | None = None


class ServerSettings(BaseSettings):
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    user_header: str = "X-User-Id"


class AppConfig(BaseSettings):
    """Root application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="YOGAFLOW_",
        env_nested_delimiter="__",
    )

    config_dir: Path = Field(default_factory=_default_config_dir)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    @classmethod
    def settings_customise_sources(cls, settings_cls, **kwargs):  # type: ignore[override]
        toml_path = _default_config_dir() / "config.toml"
        sources = (
            kwargs.get("init_settings"),
            kwargs.get("env_settings"),
        )
        if toml_path.exists():
            sources = (*sources, TomlConfigSettingsSource(settings_cls, toml_file=toml_path))
        return (*sources, kwargs.get("dotenv_settings"), kwargs.get("file_secret_settings"))

    def ensure_dirs(self) -> None:
        """Create the config directory if it doesn't exist."""
        self.config_dir.mkdir(parents=True, exist_ok=True)


def load_config() -> AppConfig:
    """Load application config, creating defaults if needed."""
    config = AppConfig()
    config.ensure_dirs()
    return config
