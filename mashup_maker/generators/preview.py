"""Entry-point snippets with highlighted API integration points."""

from __future__ import annotations

import re

from mashup_maker.generators.base import PreviewExtractor
from mashup_maker.models import CodePreview, FileNode, GeneratedProject

SNIPPET_LINES = 40
TRUNCATION_MARKER = "// ... (more code below)"

BACKEND_ENTRY = "src/server.js"
FRONTEND_ENTRY = "src/App.jsx"

# JSX comment first so `{/* ... */}` is wrapped whole
_INTEGRATION_POINT = re.compile(
    r"(\{/\*.*API Integration Point:.*\*/\}"
    r"|/\*.*API Integration Point:.*\*/"
    r"|//.*API Integration Point:.*)"
)


def extract_lines(code: str, limit: int = SNIPPET_LINES) -> str:
    lines = code.split("\n")
    snippet = lines[:limit]
    if len(lines) > limit:
        snippet.append(TRUNCATION_MARKER)
    return "\n".join(snippet)


def mark_integration_points(code: str) -> str:
    return _INTEGRATION_POINT.sub(r">>> \1 <<<", code)


class CodePreviewGenerator(PreviewExtractor):

    def generate_preview(self, project: GeneratedProject) -> CodePreview:
        return CodePreview(
            backend_snippet=self._snippet(
                project.backend.files.get(BACKEND_ENTRY),
                "// Backend entry point not found",
            ),
            frontend_snippet=self._snippet(
                project.frontend.files.get(FRONTEND_ENTRY),
                "// Frontend entry point not found",
            ),
            structure=FileNode.directory("project", [
                project.backend.structure,
                project.frontend.structure,
                FileNode.file("README.md"),
            ]),
        )

    @staticmethod
    def _snippet(code: str | None, missing: str) -> str:
        if code is None:
            return missing
        return mark_integration_points(extract_lines(code))
