"""High-level mashup service: facade for the API layer."""

from __future__ import annotations

import logging
import random
from collections import Counter
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from mashup_maker.core.config import Settings, get_settings
from mashup_maker.core.errors import FileNotFound, InvalidFilename
from mashup_maker.core.pipeline import MashupPipeline
from mashup_maker.core.registry import APIRegistry, create_default_registry
from mashup_maker.core.selector import APISelector
from mashup_maker.exporter.zip_exporter import ZipExporter
from mashup_maker.generators.code import ScaffoldCodeGenerator
from mashup_maker.generators.idea import TemplateIdeaGenerator
from mashup_maker.generators.layout import UILayoutSuggester
from mashup_maker.generators.preview import CodePreviewGenerator
from mashup_maker.models import APIDescriptor, PipelineOutcome, SelectionCriteria

logger = logging.getLogger(__name__)


class MashupService:
    """Wires registry, selector, generators, and exporter from settings."""

    def __init__(
        self,
        settings: Settings | None = None,
        registry: APIRegistry | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.registry = registry or create_default_registry(self.settings.REGISTRY_PATH)
        self.selector = APISelector(self.registry, rng=rng)
        self.exporter = ZipExporter(self.settings.temp_dir)
        self.pipeline = MashupPipeline(
            self.selector,
            TemplateIdeaGenerator(),
            ScaffoldCodeGenerator(),
            UILayoutSuggester(),
            CodePreviewGenerator(),
            self.exporter,
            selection_size=self.settings.SELECTION_SIZE,
            download_base=self.settings.DOWNLOAD_BASE_PATH,
        )

    # -- Generation ------------------------------------------------------

    async def generate(self, criteria: SelectionCriteria | None = None) -> PipelineOutcome:
        return await self.pipeline.run(criteria)

    async def generate_custom(self, api_ids: Sequence[str]) -> PipelineOutcome:
        return await self.pipeline.run_with_ids(api_ids)

    def archive_path(self, filename: str) -> Path:
        """Resolve a download name to an existing archive in the temp dir."""
        if ".." in filename or "/" in filename or "\\" in filename or not filename.endswith(".zip"):
            raise InvalidFilename(filename)
        path = self.exporter.temp_dir / filename
        if not path.is_file():
            raise FileNotFound(filename)
        return path

    async def cleanup(self, max_age_hours: float | None = None) -> int:
        hours = self.settings.CLEANUP_MAX_AGE_HOURS if max_age_hours is None else max_age_hours
        return await self.exporter.cleanup_old_files(hours)

    # -- Catalog ---------------------------------------------------------

    def list_apis(
        self, category: str | None = None, auth_type: str | None = None,
    ) -> list[APIDescriptor]:
        """Category filter wins over auth type when both are given."""
        if category:
            return self.registry.get_by_category(category)
        if auth_type:
            return self.registry.get_by_auth_type(auth_type)
        return self.registry.get_all()

    def categories(self) -> dict[str, Any]:
        counts = Counter(api.category for api in self.registry.get_all())
        return {
            "categories": sorted(counts),
            "categoryData": dict(counts),
            "totalCategories": len(counts),
        }

    def add_api(self, data: dict[str, Any]) -> APIDescriptor:
        return self.registry.add(data)
