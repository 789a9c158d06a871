"""Package-relative path constants for bundled data and templates."""

from __future__ import annotations
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parent

DATA_DIR = PACKAGE_DIR / "data"
DEFAULT_REGISTRY_PATH = DATA_DIR / "api_registry.json"

# Jinja2 templates: scaffolded project files and archive extras
TEMPLATES_DIR = PACKAGE_DIR / "templates"
SCAFFOLD_TEMPLATES_DIR = TEMPLATES_DIR / "scaffold"
ARCHIVE_TEMPLATES_DIR = TEMPLATES_DIR / "archive"
