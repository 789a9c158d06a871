"""Per-invocation pipeline state and outcomes."""

from __future__ import annotations
from enum import Enum
from pathlib import Path
from typing import Any, Literal, Union

from pydantic import ConfigDict, Field

from .api import APIDescriptor
from .base import CamelModel
from .idea import AppIdea
from .layout import CodePreview, UILayout
from .project import GeneratedProject


class ErrorKind(str, Enum):
    API_SELECTION_FAILED = "API_SELECTION_FAILED"
    IDEA_GENERATION_FAILED = "IDEA_GENERATION_FAILED"
    CODE_GENERATION_FAILED = "CODE_GENERATION_FAILED"
    ARCHIVE_EXPORT_FAILED = "ARCHIVE_EXPORT_FAILED"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


class GenerationRun(CamelModel):
    """
    Holds everything one pipeline invocation has produced so far.

    Stages fill fields in order; anything still None either failed
    non-fatally or was never reached.
    """
    run_id: str
    started_at: int  # epoch milliseconds

    selected_apis: list[APIDescriptor] = []
    idea_result: AppIdea | None = None
    code_artifact: GeneratedProject | None = None
    ui_layout: UILayout | None = None
    preview: CodePreview | None = None
    archive_path: Path | None = None

    def summary(self) -> dict[str, Any]:
        return {
            "runId": self.run_id,
            "hasIdea": self.idea_result is not None,
            "hasCode": self.code_artifact is not None,
            "hasUILayout": self.ui_layout is not None,
            "hasCodePreview": self.preview is not None,
            "hasArchive": self.archive_path is not None,
        }

    def partial_result(self) -> dict[str, Any]:
        """Client-facing view of the partial run, in response field names."""
        partial: dict[str, Any] = {"id": self.run_id, "timestamp": self.started_at}
        if self.idea_result is not None:
            partial["idea"] = self.idea_result.to_wire()
        if self.ui_layout is not None:
            partial["uiLayout"] = self.ui_layout.to_wire()
        if self.preview is not None:
            partial["codePreview"] = self.preview.to_wire()
        return partial


class PipelineSuccess(CamelModel):
    success: Literal[True] = True
    run_id: str
    idea: AppIdea
    ui_layout: UILayout
    preview: CodePreview
    download_locator: str
    timestamp: int
    run: GenerationRun = Field(exclude=True)


class PipelineFailure(CamelModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: Literal[False] = False
    error_kind: ErrorKind
    message: str
    cause: Exception | None = Field(default=None, exclude=True)
    partial_run: GenerationRun

    @property
    def cause_message(self) -> str:
        if self.cause is None:
            return ""
        return getattr(self.cause, "message", None) or str(self.cause)

    @property
    def details(self) -> Any:
        """Structured details from the cause when it has them, else its message."""
        cause_details = getattr(self.cause, "details", None)
        if cause_details:
            return {"reason": self.cause_message, **cause_details}
        return self.cause_message


PipelineOutcome = Union[PipelineSuccess, PipelineFailure]
