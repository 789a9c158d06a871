"""Identifier helpers for generated file, component, and variable names."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_NON_ALNUM_ANY_CASE = re.compile(r"[^a-zA-Z0-9]+")


def sanitize_file_name(name: str) -> str:
    """'Open Weather API' -> 'open-weather-api'."""
    return _NON_ALNUM.sub("-", name.lower()).strip("-")


def to_component_name(name: str) -> str:
    """'Open Weather API' -> 'OpenWeatherApi'. Never starts with a digit."""
    words = _NON_ALNUM_ANY_CASE.sub(" ", name).split()
    component = "".join(w[:1].upper() + w[1:].lower() for w in words)
    if not component or not component[0].isalpha():
        component = "Component" + component
    return component


def to_service_name(name: str) -> str:
    return sanitize_file_name(name).replace("-", "")


def to_data_key(name: str) -> str:
    return sanitize_file_name(name).replace("-", "_")


def to_env_var_name(name: str) -> str:
    return to_data_key(name).upper() + "_API_KEY"


def unique_names(
    names: Iterable[str],
    suffix: Callable[[str, int], str] = lambda n, i: f"{n}{i}",
) -> list[str]:
    """De-duplicate names by suffixing repeats with the position index.

    The index is bumped until the suffixed name is free, so a suffix never
    lands on a name that is already taken.
    """
    used: set[str] = set()
    result: list[str] = []
    for index, name in enumerate(names):
        candidate, n = name, index
        while candidate in used:
            candidate = suffix(name, n)
            n += 1
        used.add(candidate)
        result.append(candidate)
    return result
