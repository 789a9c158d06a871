"""API registry: loads, stores, and looks up curated API descriptors."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from mashup_maker.core.errors import AlreadyExists, InvalidDescriptor, RegistryUnavailable
from mashup_maker.models import APIDescriptor, AuthType
from mashup_maker.paths import DEFAULT_REGISTRY_PATH

module_logger = logging.getLogger(__name__)


class APIRegistry:
    """
    Catalog of curated public APIs backed by a JSON file (`{"apis": [...]}`).

    The file is read once at construction. `add()` is the only write path:
    it runs under a lock and rewrites the whole file through a temp file
    and `os.replace`, so a reader never sees a half-written store.
    """

    def __init__(
        self,
        path: Path | str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.path = Path(path) if path is not None else DEFAULT_REGISTRY_PATH
        self._log = logger or module_logger
        self._lock = threading.Lock()
        self._apis: dict[str, APIDescriptor] = {}
        self.reload()

    def reload(self) -> None:
        """(Re)read the backing file. A missing file means an empty registry."""
        if not self.path.exists():
            self._log.warning("API registry file not found, starting empty: %s", self.path)
            self._apis = {}
            return
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            entries = raw.get("apis", []) if isinstance(raw, dict) else raw
            apis = [APIDescriptor.model_validate(e) for e in entries]
        except (OSError, ValueError, AttributeError) as e:
            # ValidationError and JSONDecodeError are both ValueErrors
            self._log.error("Failed to load API registry %s: %s", self.path, e)
            raise RegistryUnavailable("Failed to load API registry", str(self.path)) from e

        self._apis = {a.id: a for a in apis}
        self._log.info("Loaded %d APIs from registry", len(self._apis))

    # -- Reads -----------------------------------------------------------

    def get_all(self) -> list[APIDescriptor]:
        return list(self._apis.values())

    def get_by_id(self, api_id: str) -> APIDescriptor | None:
        return self._apis.get(api_id)

    def get_by_category(self, category: str) -> list[APIDescriptor]:
        key = category.lower()
        return [a for a in self._apis.values() if a.category_key == key]

    def get_by_auth_type(self, auth_type: AuthType | str) -> list[APIDescriptor]:
        kind = AuthType(auth_type.lower()) if isinstance(auth_type, str) else auth_type
        return [a for a in self._apis.values() if a.auth_type == kind]

    def get_categories(self) -> list[str]:
        """Distinct category names as stored, in first-seen order."""
        return list(dict.fromkeys(a.category for a in self._apis.values()))

    def count(self) -> int:
        return len(self._apis)

    # -- Writes ----------------------------------------------------------

    def add(self, descriptor: APIDescriptor | dict[str, Any]) -> APIDescriptor:
        """Validate, insert, and persist a new API. Returns the stored descriptor."""
        if isinstance(descriptor, APIDescriptor):
            api = descriptor
        else:
            try:
                api = APIDescriptor.model_validate(descriptor)
            except ValidationError as e:
                self._log.warning("API validation failed: %s", descriptor.get("id"))
                raise InvalidDescriptor(
                    [{"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                     for err in e.errors()]
                ) from e

        with self._lock:
            if api.id in self._apis:
                self._log.warning("Attempted to add duplicate API: %s", api.id)
                raise AlreadyExists(api.id)
            self._apis[api.id] = api
            try:
                self._save()
            except OSError as e:
                del self._apis[api.id]
                self._log.error("Failed to save API registry %s: %s", self.path, e)
                raise RegistryUnavailable("Failed to save API registry", str(self.path)) from e

        self._log.info("API added: %s (%s)", api.id, api.name)
        return api

    def _save(self) -> None:
        payload = {"apis": [a.to_wire() for a in self._apis.values()]}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".registry-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


def create_default_registry(
    path: Path | str | None = None,
    logger: logging.Logger | None = None,
) -> APIRegistry:
    """Registry over the bundled catalog unless another path is given."""
    return APIRegistry(path or DEFAULT_REGISTRY_PATH, logger=logger)
