"""Application settings loaded from the environment and .env files."""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mashup_maker.generators.idea import REQUIRED_APIS
from mashup_maker.paths import DEFAULT_REGISTRY_PATH


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # App
    APP_NAME: str = "Mashup Maker"
    ENVIRONMENT: str = "development"  # development | production | test

    # Storage
    REGISTRY_PATH: Path = DEFAULT_REGISTRY_PATH
    TEMP_DIR: Path = Path("temp")

    # Generation
    SELECTION_SIZE: int = REQUIRED_APIS
    DOWNLOAD_BASE_PATH: str = "/api/mashup"
    CLEANUP_MAX_AGE_HOURS: float = 24.0
    CLEANUP_ON_STARTUP: bool = True

    # CORS
    # Accept list or CSV/JSON string from env; normalized to list[str]
    CORS_ORIGINS: list[str] | str = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    @field_validator("ENVIRONMENT")
    @classmethod
    def _check_environment(cls, v: str) -> str:
        env = v.strip().lower()
        if env not in {"development", "production", "test"}:
            raise ValueError("ENVIRONMENT must be 'development', 'production', or 'test'")
        return env

    @field_validator("SELECTION_SIZE")
    @classmethod
    def _check_selection_size(cls, v: int) -> int:
        # Ideas are synthesized from a fixed number of APIs
        if v != REQUIRED_APIS:
            raise ValueError(f"SELECTION_SIZE must be {REQUIRED_APIS}")
        return v

    @field_validator("DOWNLOAD_BASE_PATH")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: object) -> list[str]:
        """Allow list, CSV string, or JSON array string for CORS origins."""
        if isinstance(v, list):
            return [str(i).strip() for i in v]
        if isinstance(v, str):
            s = v.strip()
            if not s:
                return []
            if s.startswith("["):
                try:
                    parsed = json.loads(s)
                except json.JSONDecodeError as e:
                    raise ValueError(
                        "CORS_ORIGINS must be a CSV list or JSON array string"
                    ) from e
                if not isinstance(parsed, list):
                    raise ValueError("CORS_ORIGINS JSON must be a list")
                return [str(i).strip() for i in parsed]
            return [i.strip() for i in s.split(",") if i.strip()]
        raise ValueError("Invalid CORS_ORIGINS type; expected str or list[str]")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def temp_dir(self) -> Path:
        """TEMP_DIR resolved against the working directory when relative."""
        return self.TEMP_DIR if self.TEMP_DIR.is_absolute() else Path.cwd() / self.TEMP_DIR


@lru_cache
def get_settings() -> Settings:
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env == "production":
        env_file = ".env.prod"
    elif env == "development":
        env_file = ".env"
    else:
        # test environment - defaults only
        env_file = ""
    return Settings(_env_file=env_file or None)  # type: ignore[call-arg]
