"""Shared test fixtures.

ENVIRONMENT is forced to "test" before anything imports the settings so no
.env file is read.
"""

import json
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

os.environ.setdefault("ENVIRONMENT", "test")

from mashup_maker.core.config import Settings
from mashup_maker.core.registry import APIRegistry
from mashup_maker.models import APIDescriptor, AppIdea


def api_entry(api_id: str, category: str, auth_type: str = "none", **overrides: Any) -> dict[str, Any]:
    """A valid registry entry in wire (camelCase) form."""
    entry = {
        "id": api_id,
        "name": f"{api_id.title()} API",
        "description": f"Data from {api_id}",
        "category": category,
        "baseUrl": f"https://{api_id}.example.com",
        "sampleEndpoint": "/v1/items",
        "authType": auth_type,
        "corsCompatible": True,
        "documentationUrl": f"https://{api_id}.example.com/docs",
    }
    entry.update(overrides)
    return entry


SAMPLE_ENTRIES = [
    api_entry("weather", "weather"),
    api_entry("spotify", "music", "oauth"),
    api_entry("mapbox", "maps", "apikey", mockData={"features": []}),
    api_entry("news", "news", "apikey", corsCompatible=False),
]


def write_registry(path: Path, entries: list[dict[str, Any]]) -> Path:
    path.write_text(json.dumps({"apis": entries}), encoding="utf-8")
    return path


@pytest.fixture
def make_api() -> Callable[..., APIDescriptor]:
    def _make(api_id: str, category: str, auth_type: str = "none", **overrides: Any) -> APIDescriptor:
        return APIDescriptor.model_validate(api_entry(api_id, category, auth_type, **overrides))
    return _make


@pytest.fixture
def registry_factory(tmp_path: Path) -> Callable[[list[dict[str, Any]]], APIRegistry]:
    def _factory(entries: list[dict[str, Any]]) -> APIRegistry:
        return APIRegistry(write_registry(tmp_path / "registry.json", entries))
    return _factory


@pytest.fixture
def registry(registry_factory) -> APIRegistry:
    return registry_factory(SAMPLE_ENTRIES)


@pytest.fixture
def sample_apis(registry: APIRegistry) -> list[APIDescriptor]:
    return registry.get_all()


@pytest.fixture
def idea(sample_apis: list[APIDescriptor]) -> AppIdea:
    return AppIdea(
        app_name="Weather Spotify Mapbox",
        description="Combines weather, music and maps.",
        features=["Forecast-driven playlists", "Map of listening spots", "Unified dashboard"],
        rationale="Weather shapes what people listen to and where they go.",
        apis=sample_apis[:3],
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        REGISTRY_PATH=write_registry(tmp_path / "registry.json", SAMPLE_ENTRIES),
        TEMP_DIR=tmp_path / "archives",
        CLEANUP_ON_STARTUP=False,
    )


class RecordingHandler(logging.Handler):
    def __init__(self):
        super().__init__(logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def recording_logger(request) -> logging.Logger:
    """A private logger whose records are kept on `.handler.records`."""
    logger = logging.getLogger(f"test.{request.node.name}")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = RecordingHandler()
    logger.handlers = [handler]
    logger.handler = handler
    return logger
