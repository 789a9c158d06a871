import random
import re

import pytest

from mashup_maker.core.errors import (
    CodeGenerationError, IdeaGenerationError, InsufficientCategories,
    RegistryUnavailable, ZipCreationError,
)
from mashup_maker.core.pipeline import MashupPipeline
from mashup_maker.core.selector import APISelector
from mashup_maker.exporter.zip_exporter import ZipExporter
from mashup_maker.generators.base import CodeScaffolder, IdeaSynthesizer, LayoutSuggester
from mashup_maker.generators.code import ScaffoldCodeGenerator
from mashup_maker.generators.idea import TemplateIdeaGenerator
from mashup_maker.generators.layout import UILayoutSuggester
from mashup_maker.generators.preview import CodePreviewGenerator
from mashup_maker.models import (
    ErrorKind, PipelineFailure, PipelineSuccess, SelectionCriteria, UILayout,
)

from conftest import api_entry

LOCATOR = re.compile(r"^/api/mashup/download/[a-z0-9-]+\.zip$")


class FailingLayout(LayoutSuggester):
    def generate_layout(self, idea):
        raise RuntimeError("layout exploded")


class FailsUnlessMocked(IdeaSynthesizer):
    """Rejects authenticated APIs that have no mock data."""

    def __init__(self):
        self.calls = 0
        self.inner = TemplateIdeaGenerator()

    def generate_idea(self, apis):
        self.calls += 1
        if any(a.requires_auth and a.mock_data is None for a in apis):
            raise IdeaGenerationError("credentials missing")
        return self.inner.generate_idea(apis)


class AlwaysFailingCode(CodeScaffolder):
    def __init__(self):
        self.calls = 0

    def generate_project(self, idea):
        self.calls += 1
        raise CodeGenerationError("templates missing")


class FirstCallFailingCode(CodeScaffolder):
    def __init__(self):
        self.inner = ScaffoldCodeGenerator()
        self.seen = []

    def generate_project(self, idea):
        self.seen.append(idea)
        if len(self.seen) == 1:
            raise CodeGenerationError("first try fails")
        return self.inner.generate_project(idea)


@pytest.fixture
def build(registry, tmp_path):
    def _build(registry_override=None, **stages):
        parts = {
            "idea_generator": TemplateIdeaGenerator(),
            "code_generator": ScaffoldCodeGenerator(),
            "layout_suggester": UILayoutSuggester(),
            "preview_generator": CodePreviewGenerator(),
            "exporter": ZipExporter(tmp_path / "archives"),
        }
        parts.update(stages)
        selector = APISelector(registry_override or registry, rng=random.Random(0))
        return MashupPipeline(selector, **parts)
    return _build


async def test_run_succeeds(build):
    outcome = await build().run()

    assert isinstance(outcome, PipelineSuccess)
    assert len(outcome.idea.apis) == 3
    assert len({a.category.lower() for a in outcome.idea.apis}) == 3
    assert LOCATOR.match(outcome.download_locator)
    assert outcome.run.archive_path.exists()
    assert outcome.timestamp == outcome.run.started_at
    assert outcome.ui_layout.screens
    assert outcome.preview.backend_snippet


async def test_layout_failure_is_not_fatal(build):
    outcome = await build(layout_suggester=FailingLayout()).run()

    assert isinstance(outcome, PipelineSuccess)
    assert outcome.ui_layout == UILayout.empty()
    assert outcome.ui_layout.to_wire() == {
        "screens": [], "components": [], "interactionFlow": {"steps": []},
    }


async def test_preview_failure_falls_back_to_empty_preview(build):
    class FailingPreview(CodePreviewGenerator):
        def generate_preview(self, project):
            raise ValueError("bad project")

    outcome = await build(preview_generator=FailingPreview()).run()

    assert isinstance(outcome, PipelineSuccess)
    assert outcome.preview.backend_snippet == ""
    assert outcome.preview.structure.to_wire() == {
        "name": "project", "type": "directory", "children": [],
    }


async def test_unreachable_registry(build):
    class BrokenRegistry:
        def get_all(self):
            raise RegistryUnavailable("Failed to load API registry")

    outcome = await build(registry_override=BrokenRegistry()).run()

    assert isinstance(outcome, PipelineFailure)
    assert outcome.error_kind is ErrorKind.API_SELECTION_FAILED
    assert isinstance(outcome.cause, RegistryUnavailable)
    assert outcome.partial_run.selected_apis == []
    assert outcome.partial_run.idea_result is None


async def test_selection_failure_keeps_counts(build):
    outcome = await build().run(SelectionCriteria(exclude_api_ids={"weather", "spotify"}))

    assert isinstance(outcome, PipelineFailure)
    assert outcome.error_kind is ErrorKind.API_SELECTION_FAILED
    assert outcome.details["required"] == 3
    assert outcome.details["available"] == 2


async def test_insufficient_categories_surface_as_cause(build, registry_factory):
    registry = registry_factory([api_entry(f"w{i}", "weather") for i in range(4)])
    outcome = await build(registry_override=registry).run()

    assert isinstance(outcome.cause, InsufficientCategories)
    assert outcome.details == {
        "reason": outcome.cause.message, "required": 3, "available": 1,
    }


async def test_idea_retries_in_mock_mode(build):
    idea_generator = FailsUnlessMocked()
    outcome = await build(idea_generator=idea_generator).run()

    assert isinstance(outcome, PipelineSuccess)
    assert idea_generator.calls == 2
    assert all(a.mock_data is not None for a in outcome.idea.apis if a.requires_auth)


async def test_code_retry_uses_mock_idea(build):
    code_generator = FirstCallFailingCode()
    outcome = await build(code_generator=code_generator).run()

    assert isinstance(outcome, PipelineSuccess)
    first, second = code_generator.seen
    assert all(a.mock_data is not None for a in second.apis if a.requires_auth)
    assert outcome.idea == second


async def test_code_failure_keeps_idea(build):
    code_generator = AlwaysFailingCode()
    outcome = await build(code_generator=code_generator).run()

    assert isinstance(outcome, PipelineFailure)
    assert outcome.error_kind is ErrorKind.CODE_GENERATION_FAILED
    assert code_generator.calls == 2
    partial = outcome.partial_run.partial_result()
    assert "idea" in partial
    assert "uiLayout" not in partial


async def test_export_failure_keeps_layout_and_preview(build, tmp_path):
    class FailingExporter(ZipExporter):
        async def create_archive(self, project, idea):
            raise ZipCreationError("disk full")

    outcome = await build(exporter=FailingExporter(tmp_path / "x")).run()

    assert isinstance(outcome, PipelineFailure)
    assert outcome.error_kind is ErrorKind.ARCHIVE_EXPORT_FAILED
    partial = outcome.partial_run.partial_result()
    assert {"id", "timestamp", "idea", "uiLayout", "codePreview"} <= set(partial)


async def test_unexpected_errors_are_caught(build, tmp_path):
    class BrokenNaming(ZipExporter):
        def get_filename(self, path):
            raise RuntimeError("unexpected")

    outcome = await build(exporter=BrokenNaming(tmp_path / "y")).run()

    assert isinstance(outcome, PipelineFailure)
    assert outcome.error_kind is ErrorKind.UNEXPECTED_ERROR
    assert outcome.partial_run.archive_path is not None


async def test_run_with_ids(build):
    outcome = await build().run_with_ids(["news", "mapbox", "weather"])

    assert isinstance(outcome, PipelineSuccess)
    assert [a.id for a in outcome.idea.apis] == ["news", "mapbox", "weather"]


async def test_run_with_unknown_id(build):
    outcome = await build().run_with_ids(["news", "nope", "weather"])

    assert outcome.error_kind is ErrorKind.API_SELECTION_FAILED
    assert outcome.details["apiId"] == "nope"


async def test_failures_are_logged_with_run_id(build, recording_logger):
    pipeline = build(code_generator=AlwaysFailingCode(), logger=recording_logger)
    outcome = await pipeline.run()

    errors = [r for r in recording_logger.handler.records if r.levelname == "ERROR"]
    assert len(errors) == 1
    assert "CODE_GENERATION_FAILED" in errors[0].getMessage()
    assert errors[0].run_id == outcome.partial_run.run_id


def test_run_ids_are_unique():
    ids = {MashupPipeline.generate_run_id() for _ in range(1000)}
    assert len(ids) == 1000
    assert all(re.match(r"^mashup_[0-9a-z]+_[0-9a-f]{32}$", i) for i in ids)
