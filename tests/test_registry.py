import json
import threading

import pytest

from mashup_maker.core.errors import AlreadyExists, InvalidDescriptor, RegistryUnavailable
from mashup_maker.core.registry import APIRegistry, create_default_registry
from mashup_maker.models import AuthType

from conftest import api_entry


def test_loads_entries(registry):
    assert registry.count() == 4
    assert registry.get_by_id("spotify").auth_type is AuthType.OAUTH
    assert registry.get_by_id("missing") is None


def test_accepts_bare_list(tmp_path):
    path = tmp_path / "list.json"
    path.write_text(json.dumps([api_entry("a", "weather")]), encoding="utf-8")
    assert APIRegistry(path).count() == 1


def test_missing_file_means_empty_registry(tmp_path):
    assert APIRegistry(tmp_path / "nope.json").count() == 0


@pytest.mark.parametrize("content", ["{not json", json.dumps({"apis": [{"id": "x"}]})])
def test_unreadable_store_raises(tmp_path, content):
    path = tmp_path / "broken.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(RegistryUnavailable):
        APIRegistry(path)


def test_queries(registry):
    assert [a.id for a in registry.get_by_category("MUSIC")] == ["spotify"]
    assert {a.id for a in registry.get_by_auth_type("apikey")} == {"mapbox", "news"}
    assert [a.id for a in registry.get_by_auth_type(AuthType.NONE)] == ["weather"]
    assert registry.get_categories() == ["weather", "music", "maps", "news"]


def test_add_persists(registry):
    added = registry.add(api_entry("cats", "animals", "APIKEY"))

    assert added.auth_type is AuthType.APIKEY
    assert registry.get_by_id("cats") == added
    reloaded = APIRegistry(registry.path)
    assert reloaded.count() == 5
    assert reloaded.get_by_id("cats").category == "animals"
    assert not list(registry.path.parent.glob(".registry-*"))


def test_add_duplicate(registry):
    with pytest.raises(AlreadyExists) as exc:
        registry.add(api_entry("weather", "weather"))
    assert exc.value.status_code == 409


@pytest.mark.parametrize("bad", [
    {"name": ""},
    {"authType": "basic"},
    {"corsCompatible": "yes"},
    {"baseUrl": None},
    {"baseUrl": "not a url"},
    {"documentationUrl": "also not"},
    {"baseUrl": "ftp://files.example.com"},
])
def test_add_rejects_invalid_metadata(registry, bad):
    with pytest.raises(InvalidDescriptor) as exc:
        registry.add(api_entry("bad", "misc", **bad))
    assert exc.value.details["errors"]
    assert registry.get_by_id("bad") is None


def test_add_rolls_back_when_save_fails(registry, monkeypatch):
    def fail():
        raise OSError("disk full")

    monkeypatch.setattr(registry, "_save", fail)
    with pytest.raises(RegistryUnavailable):
        registry.add(api_entry("cats", "animals"))
    assert registry.get_by_id("cats") is None


def test_concurrent_adds_all_persist(registry):
    threads = [
        threading.Thread(target=registry.add, args=(api_entry(f"t{i}", "misc"),))
        for i in range(10)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert APIRegistry(registry.path).count() == 14


def test_default_registry_ships_a_diverse_catalog():
    registry = create_default_registry()
    assert registry.count() > 20
    assert len({c.lower() for c in registry.get_categories()}) >= 3
