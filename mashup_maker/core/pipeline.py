"""Mashup generation pipeline: select, ideate, scaffold, lay out, preview, export.

Stages run strictly in order. Selection and export failures are fatal;
idea and code generation get one retry with Mock Mode applied; layout
and preview fall back to empty defaults. Whatever happens, the caller
gets a PipelineSuccess or a PipelineFailure, never an exception.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable, Sequence
from typing import TypeVar

from mashup_maker.core.mock_mode import apply_mock_mode
from mashup_maker.core.result import Err, StageResult, attempt, attempt_async
from mashup_maker.core.selector import APISelector, SelectionResult
from mashup_maker.generators.base import (
    ArchiveExporter, CodeScaffolder, IdeaSynthesizer, LayoutSuggester, PreviewExtractor,
)
from mashup_maker.models import (
    CodePreview, ErrorKind, GenerationRun, PipelineFailure,
    PipelineOutcome, PipelineSuccess, SelectionCriteria, UILayout,
)

module_logger = logging.getLogger(__name__)

T = TypeVar("T")

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(n: int) -> str:
    digits = ""
    while True:
        n, r = divmod(n, 36)
        digits = _BASE36[r] + digits
        if n == 0:
            return digits


def _now_ms() -> int:
    return int(time.time() * 1000)


class MashupPipeline:
    """Runs one generation per call; holds no state between calls."""

    def __init__(
        self,
        selector: APISelector,
        idea_generator: IdeaSynthesizer,
        code_generator: CodeScaffolder,
        layout_suggester: LayoutSuggester,
        preview_generator: PreviewExtractor,
        exporter: ArchiveExporter,
        *,
        selection_size: int = 3,
        download_base: str = "/api/mashup",
        logger: logging.Logger | None = None,
    ) -> None:
        self.selector = selector
        self.idea_generator = idea_generator
        self.code_generator = code_generator
        self.layout_suggester = layout_suggester
        self.preview_generator = preview_generator
        self.exporter = exporter
        self.selection_size = selection_size
        self.download_base = download_base.rstrip("/")
        self.log = logger or module_logger

    @staticmethod
    def generate_run_id() -> str:
        """`mashup_<base36 ms timestamp>_<uuid4 hex>`."""
        return f"mashup_{_base36(_now_ms())}_{uuid.uuid4().hex}"

    async def run(self, criteria: SelectionCriteria | None = None) -> PipelineOutcome:
        """Random selection under `criteria`, then generation."""
        return await self._execute(
            lambda: self.selector.select(self.selection_size, criteria),
        )

    async def run_with_ids(self, api_ids: Sequence[str]) -> PipelineOutcome:
        """User-chosen APIs, then generation."""
        return await self._execute(lambda: self.selector.select_by_ids(api_ids))

    async def _execute(self, select: Callable[[], SelectionResult]) -> PipelineOutcome:
        run = GenerationRun(run_id=self.generate_run_id(), started_at=_now_ms())
        self.log.info("Starting mashup generation %s", run.run_id, extra={"run_id": run.run_id})
        try:
            return await self._stages(run, select)
        except Exception as e:
            return self._fail(
                run, ErrorKind.UNEXPECTED_ERROR,
                "An unexpected error occurred during mashup generation", e,
            )

    async def _stages(
        self, run: GenerationRun, select: Callable[[], SelectionResult],
    ) -> PipelineOutcome:
        # 1. Selection
        selection = attempt("selection", select)
        if isinstance(selection, Err):
            return self._fail(
                run, ErrorKind.API_SELECTION_FAILED,
                "Failed to select APIs for mashup generation", selection.error,
            )
        apis = list(selection.value)
        run.selected_apis = apis
        self.log.info(
            "Selected APIs: %s", ", ".join(a.id for a in apis),
            extra={"run_id": run.run_id, "stage": "selection"},
        )

        # 2. Idea, retried once in Mock Mode
        idea_result, _ = self._with_mock_retry(
            run, "idea",
            lambda: self.idea_generator.generate_idea(apis),
            lambda: self.idea_generator.generate_idea(list(apply_mock_mode(apis))),
        )
        if isinstance(idea_result, Err):
            return self._fail(
                run, ErrorKind.IDEA_GENERATION_FAILED,
                "Failed to generate app idea", idea_result.error,
            )
        idea = idea_result.value
        run.idea_result = idea

        # 3. Code, retried once with a Mock Mode idea that then replaces the stored one
        mock_idea = idea.model_copy(update={"apis": list(apply_mock_mode(idea.apis))})
        code_result, retried = self._with_mock_retry(
            run, "code",
            lambda: self.code_generator.generate_project(idea),
            lambda: self.code_generator.generate_project(mock_idea),
        )
        if isinstance(code_result, Err):
            return self._fail(
                run, ErrorKind.CODE_GENERATION_FAILED,
                "Failed to generate code", code_result.error,
            )
        if retried:
            idea = mock_idea
            run.idea_result = idea
        project = code_result.value
        run.code_artifact = project

        # 4. Layout, non-fatal
        layout = attempt("layout", self.layout_suggester.generate_layout, idea)
        if isinstance(layout, Err):
            self.log.warning(
                "UI layout generation failed, continuing without it: %s", layout.message,
                extra={"run_id": run.run_id, "stage": "layout"},
            )
            run.ui_layout = UILayout.empty()
        else:
            run.ui_layout = layout.value

        # 5. Preview, non-fatal
        preview = attempt("preview", self.preview_generator.generate_preview, project)
        if isinstance(preview, Err):
            self.log.warning(
                "Code preview generation failed, using empty preview: %s", preview.message,
                extra={"run_id": run.run_id, "stage": "preview"},
            )
            run.preview = CodePreview.empty()
        else:
            run.preview = preview.value

        # 6. Export
        archive = await attempt_async("export", self.exporter.create_archive, project, idea)
        if isinstance(archive, Err):
            return self._fail(
                run, ErrorKind.ARCHIVE_EXPORT_FAILED,
                "Failed to create downloadable archive", archive.error,
            )
        run.archive_path = archive.value

        locator = f"{self.download_base}/download/{self.exporter.get_filename(archive.value)}"
        self.log.info(
            "Mashup generation completed: %s", idea.app_name,
            extra={"run_id": run.run_id},
        )
        return PipelineSuccess(
            run_id=run.run_id,
            idea=idea,
            ui_layout=run.ui_layout,
            preview=run.preview,
            download_locator=locator,
            timestamp=run.started_at,
            run=run,
        )

    def _with_mock_retry(
        self,
        run: GenerationRun,
        stage: str,
        first: Callable[[], T],
        fallback: Callable[[], T],
    ) -> tuple[StageResult[T], bool]:
        """Run `first`; on failure run `fallback` once. Second item: whether it retried."""
        result = attempt(stage, first)
        if not isinstance(result, Err):
            return result, False
        self.log.warning(
            "%s generation failed, retrying in mock mode: %s", stage.capitalize(), result.message,
            extra={"run_id": run.run_id, "stage": stage},
        )
        return attempt(stage, fallback), True

    def _fail(
        self, run: GenerationRun, kind: ErrorKind, message: str, cause: Exception,
    ) -> PipelineFailure:
        self.log.error(
            "%s: %s (%s) partial=%s", kind.value, message, cause, run.summary(),
            extra={
                "run_id": run.run_id,
                "error_code": getattr(cause, "error_code", type(cause).__name__),
            },
        )
        return PipelineFailure(error_kind=kind, message=message, cause=cause, partial_run=run)
