"""ZIP packaging of generated projects and expiry of old archives."""

from __future__ import annotations

import asyncio
import logging
import re
import time
import zipfile
from pathlib import Path
from typing import Any

from mashup_maker.core.errors import ZipCreationError
from mashup_maker.generators.base import ArchiveExporter
from mashup_maker.generators.code import create_template_env
from mashup_maker.models import AppIdea, CodeBundle, GeneratedProject
from mashup_maker.paths import ARCHIVE_TEMPLATES_DIR

MAX_FILENAME_LENGTH = 50

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def sanitize_filename(name: str) -> str:
    """'My App!' -> 'my-app', capped at 50 characters."""
    return _NON_ALNUM.sub("-", name.lower()).strip("-")[:MAX_FILENAME_LENGTH]


class ZipExporter(ArchiveExporter):
    """
    Writes `<sanitized app name>.zip` into a temp directory.

    Layout inside the archive:
    - backend/...   every backend file under its relative path
    - frontend/...  every frontend file under its relative path
    - README.md     setup and integration notes
    - index.html    a static landing page for the project
    """

    def __init__(
        self,
        temp_dir: Path | str,
        logger: logging.Logger | None = None,
        templates_dir: Path = ARCHIVE_TEMPLATES_DIR,
    ) -> None:
        self.temp_dir = Path(temp_dir)
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        self.logger = logger or logging.getLogger(__name__)
        self.env = create_template_env(templates_dir)

    async def create_archive(self, project: GeneratedProject, idea: AppIdea) -> Path:
        filename = f"{sanitize_filename(idea.app_name) or 'mashup'}.zip"
        path = self.temp_dir / filename
        self.logger.info("Creating ZIP archive %s for %s", filename, idea.app_name)
        try:
            context = self._context(idea)
            entries = {
                **self._prefixed(project.backend, "backend"),
                **self._prefixed(project.frontend, "frontend"),
                "README.md": self.env.get_template("README.md.j2").render(**context),
                "index.html": self.env.get_template("index.html.j2").render(**context),
            }
            await asyncio.to_thread(self._write, path, entries)
        except Exception as e:
            self.logger.error("Failed to create ZIP archive %s: %s", filename, e)
            raise ZipCreationError(
                "Failed to create ZIP archive",
                {"appName": idea.app_name, "filename": filename, "originalError": str(e)},
            ) from e

        self.logger.info("ZIP archive created: %s (%d bytes)", path, path.stat().st_size)
        return path

    async def cleanup_old_files(self, max_age_hours: float = 24) -> int:
        """Delete `.zip` files older than `max_age_hours`. Returns how many went."""
        return await asyncio.to_thread(self._cleanup, max_age_hours)

    def _cleanup(self, max_age_hours: float) -> int:
        self.logger.info("Starting cleanup of ZIP files older than %sh", max_age_hours)
        max_age = max_age_hours * 3600
        now = time.time()
        removed = 0
        for path in self.temp_dir.glob("*.zip"):
            try:
                age = now - path.stat().st_mtime
                if age > max_age:
                    path.unlink()
                    removed += 1
                    self.logger.info("Removed %s (%.1fh old)", path.name, age / 3600)
            except OSError as e:
                self.logger.warning("Failed to clean up %s: %s", path.name, e)
        self.logger.info("Cleanup completed: %d file(s) removed", removed)
        return removed

    @staticmethod
    def _prefixed(bundle: CodeBundle, prefix: str) -> dict[str, str]:
        return {f"{prefix}/{rel}": content for rel, content in bundle.files.items()}

    @staticmethod
    def _context(idea: AppIdea) -> dict[str, Any]:
        apis = [api.model_dump(mode="json") for api in idea.apis]
        return {
            "app_name": idea.app_name,
            "description": idea.description,
            "features": idea.features,
            "rationale": idea.rationale,
            "apis": apis,
            "mock_apis": [a for a, api in zip(apis, idea.apis) if api.requires_auth],
        }

    @staticmethod
    def _write(path: Path, entries: dict[str, str]) -> None:
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as zf:
            for name, content in entries.items():
                zf.writestr(name, content)
