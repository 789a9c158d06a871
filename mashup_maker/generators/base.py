"""Interfaces for the pipeline's generation stages.

Each stage is:
- Narrow: one method from validated input to one artifact
- Replaceable: the pipeline only sees these interfaces
- Allowed to raise: the pipeline decides whether a failure is fatal
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from mashup_maker.models import (
    APIDescriptor, AppIdea, CodePreview, GeneratedProject, UILayout,
)


class IdeaSynthesizer(ABC):
    """Turns a selection of APIs into an app concept."""

    @abstractmethod
    def generate_idea(self, apis: Sequence[APIDescriptor]) -> AppIdea:
        ...


class CodeScaffolder(ABC):
    """Renders backend/frontend boilerplate for an idea."""

    @abstractmethod
    def generate_project(self, idea: AppIdea) -> GeneratedProject:
        ...


class LayoutSuggester(ABC):
    """Suggests screens, components, and navigation for an idea."""

    @abstractmethod
    def generate_layout(self, idea: AppIdea) -> UILayout:
        ...


class PreviewExtractor(ABC):
    """Pulls short, annotated snippets and the file tree out of a project."""

    @abstractmethod
    def generate_preview(self, project: GeneratedProject) -> CodePreview:
        ...


class ArchiveExporter(ABC):
    """Packages a project into a downloadable file."""

    @abstractmethod
    async def create_archive(self, project: GeneratedProject, idea: AppIdea) -> Path:
        """Write the archive and return its path."""
        ...

    def get_filename(self, path: Path) -> str:
        return path.name
