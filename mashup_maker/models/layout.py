"""UI layout suggestions and code previews."""

from __future__ import annotations
from typing import Literal

from pydantic import Field

from .base import CamelModel
from .project import FileNode

ComponentType = Literal["card", "list", "chart", "form", "map", "player"]


class Screen(CamelModel):
    name: str
    description: str
    components: list[str]


class ComponentSuggestion(CamelModel):
    type: ComponentType
    purpose: str
    api_source: str


class FlowStep(CamelModel):
    """Navigation from one screen to another."""
    source: str = Field(alias="from")
    target: str = Field(alias="to")
    action: str


class InteractionFlow(CamelModel):
    steps: list[FlowStep] = []


class UILayout(CamelModel):
    screens: list[Screen] = []
    components: list[ComponentSuggestion] = []
    interaction_flow: InteractionFlow = Field(default_factory=InteractionFlow)

    @classmethod
    def empty(cls) -> UILayout:
        return cls()


class CodePreview(CamelModel):
    backend_snippet: str
    frontend_snippet: str
    structure: FileNode

    @classmethod
    def empty(cls) -> CodePreview:
        return cls(
            backend_snippet="",
            frontend_snippet="",
            structure=FileNode.directory("project"),
        )
