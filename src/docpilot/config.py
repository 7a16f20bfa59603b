"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (DOCPILOT__ORCHESTRATOR__MAX_ITERATIONS=8)
  2. docpilot.yaml          (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; every field has a default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)


def _find_config_file() -> str | None:
    """Return the path of the first docpilot.yaml found, or None."""
    candidates = [
        Path("docpilot.yaml"),
        Path(platformdirs.user_config_dir("docpilot")) / "docpilot.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080


class LLMSettings(BaseModel):
    base_url: str = "https://openrouter.ai/api/v1"
    api_key: str | None = None
    model: str = "openai/gpt-5-mini"
    temperature: float = 0.7
    # Attribution headers expected by OpenRouter
    site_url: str = "http://localhost:3000"
    app_title: str = "Docs Chat"


class OrchestratorSettings(BaseModel):
    max_iterations: int = Field(default=6, ge=1)


class CacheSettings(BaseModel):
    max_entries: int = Field(default=200, ge=1)
    ttl_seconds: float = Field(default=30 * 60, gt=0)


class DocsSettings(BaseModel):
    host: str = "developers.glean.com"
    corpus_path: str | None = None
    suggestion_min_distance: int = 5
    suggestion_ratio: float = 0.1


class FetcherSettings(BaseModel):
    timeout_seconds: float = 30.0
    max_redirects: int = 3


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: DOCPILOT__SERVER__PORT=9090
        env_prefix="DOCPILOT__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    llm: LLMSettings = LLMSettings()
    orchestrator: OrchestratorSettings = OrchestratorSettings()
    cache: CacheSettings = CacheSettings()
    docs: DocsSettings = DocsSettings()
    fetcher: FetcherSettings = FetcherSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
