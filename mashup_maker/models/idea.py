"""Synthesized app concept."""

from __future__ import annotations

from .api import APIDescriptor
from .base import CamelModel


class AppIdea(CamelModel):
    app_name: str
    description: str
    features: list[str]
    rationale: str
    apis: list[APIDescriptor]
