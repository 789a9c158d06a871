import os
import time
import zipfile

import pytest

from mashup_maker.core.errors import ZipCreationError
from mashup_maker.exporter.zip_exporter import ZipExporter, sanitize_filename
from mashup_maker.generators.code import ScaffoldCodeGenerator


@pytest.fixture
def exporter(tmp_path):
    return ZipExporter(tmp_path / "archives")


@pytest.mark.parametrize("name, expected", [
    ("Weather Spotify Hub", "weather-spotify-hub"),
    ("  --Smart!!Music--  ", "smart-music"),
    ("x" * 80, "x" * 50),
])
def test_sanitize_filename(name, expected):
    assert sanitize_filename(name) == expected


async def test_archive_contents(exporter, idea):
    project = ScaffoldCodeGenerator().generate_project(idea)
    path = await exporter.create_archive(project, idea)

    assert path == exporter.temp_dir / "weather-spotify-mapbox.zip"
    assert exporter.get_filename(path) == "weather-spotify-mapbox.zip"
    with zipfile.ZipFile(path) as zf:
        names = set(zf.namelist())
        readme = zf.read("README.md").decode()
        landing = zf.read("index.html").decode()

    assert {"README.md", "index.html", "backend/src/server.js", "frontend/src/App.jsx"} <= names
    assert len(names) == len(project.backend.files) + len(project.frontend.files) + 2
    assert "### Mock Mode Active" in readme
    assert "**Spotify API** (oauth)" in readme
    assert "<h1>Weather Spotify Mapbox</h1>" in landing


async def test_landing_page_escapes_html(exporter, idea):
    evil = idea.model_copy(update={"app_name": "<script>x</script>"})
    project = ScaffoldCodeGenerator().generate_project(idea)
    path = await exporter.create_archive(project, evil)

    with zipfile.ZipFile(path) as zf:
        landing = zf.read("index.html").decode()
    assert "<script>x</script>" not in landing


async def test_write_failure_raises_zip_creation_error(exporter, idea, monkeypatch):
    def fail(path, entries):
        raise OSError("read-only file system")

    monkeypatch.setattr(exporter, "_write", fail)
    project = ScaffoldCodeGenerator().generate_project(idea)
    with pytest.raises(ZipCreationError) as exc:
        await exporter.create_archive(project, idea)
    assert "read-only" in exc.value.details["originalError"]


async def test_cleanup_removes_only_old_archives(exporter):
    old = exporter.temp_dir / "old.zip"
    fresh = exporter.temp_dir / "fresh.zip"
    other = exporter.temp_dir / "notes.txt"
    for path in (old, fresh, other):
        path.write_bytes(b"x")
    two_days_ago = time.time() - 48 * 3600
    os.utime(old, (two_days_ago, two_days_ago))
    os.utime(other, (two_days_ago, two_days_ago))

    removed = await exporter.cleanup_old_files(24)

    assert removed == 1
    assert not old.exists()
    assert fresh.exists()
    assert other.exists()
