"""Mock Mode: placeholder data for APIs that need credentials we don't hold."""

from __future__ import annotations

import time
from collections.abc import Iterable
from typing import Any

from mashup_maker.models import APIDescriptor


def placeholder_data(api: APIDescriptor) -> dict[str, Any]:
    return {
        "message": f"Mock data for {api.name}",
        "data": [],
        "timestamp": int(time.time() * 1000),
    }


def apply_mock_mode(apis: Iterable[APIDescriptor]) -> tuple[APIDescriptor, ...]:
    """
    Attach placeholder `mock_data` to apikey/oauth APIs that have none.

    Everything else passes through as the same object, so applying this
    twice gives the same result as applying it once. Only `mock_data`
    ever changes.
    """
    return tuple(
        api.model_copy(update={"mock_data": placeholder_data(api)})
        if api.requires_auth and api.mock_data is None
        else api
        for api in apis
    )
