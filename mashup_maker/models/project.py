"""Scaffolded project artifacts."""

from __future__ import annotations
from typing import Literal

from .base import CamelModel


class FileNode(CamelModel):
    """A file or directory in a generated project tree."""
    name: str
    type: Literal["file", "directory"]
    children: list[FileNode] | None = None

    @classmethod
    def file(cls, name: str) -> FileNode:
        return cls(name=name, type="file")

    @classmethod
    def directory(cls, name: str, children: list[FileNode] | None = None) -> FileNode:
        return cls(name=name, type="directory", children=children or [])


class CodeBundle(CamelModel):
    """One half of a project: its tree plus relative path -> file content."""
    structure: FileNode
    files: dict[str, str]


class GeneratedProject(CamelModel):
    backend: CodeBundle
    frontend: CodeBundle
    readme: str
