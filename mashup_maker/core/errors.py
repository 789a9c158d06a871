"""Domain exceptions.

Every exception carries a stable `error_code`, the HTTP `status_code` the
API layer should answer with, and a `details` mapping safe to return to
clients. Pipeline stages never let these escape: the orchestrator turns
them into a failed outcome that keeps the partial run.
"""

from __future__ import annotations

from typing import Any


class MashupError(Exception):
    """Base class for all domain errors."""

    error_code: str = "INTERNAL_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"


# -- Registry -------------------------------------------------------------

class RegistryUnavailable(MashupError):
    error_code = "API_REGISTRY_ERROR"

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message, {"path": path} if path else None)


class InvalidDescriptor(MashupError):
    error_code = "INVALID_API_METADATA"
    status_code = 400

    def __init__(self, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(
            "Invalid API metadata: all required fields must be present and valid",
            {"errors": errors or []},
        )


class AlreadyExists(MashupError):
    error_code = "DUPLICATE_API"
    status_code = 409

    def __init__(self, api_id: str) -> None:
        super().__init__(f'API with id "{api_id}" already exists', {"apiId": api_id})
        self.api_id = api_id


class NotFound(MashupError):
    error_code = "API_NOT_FOUND"
    status_code = 404

    def __init__(self, api_id: str) -> None:
        super().__init__(f'API with id "{api_id}" not found', {"apiId": api_id})
        self.api_id = api_id


# -- Selection ------------------------------------------------------------

class InsufficientCandidates(MashupError):
    error_code = "INSUFFICIENT_APIS"
    status_code = 400

    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            f"Insufficient APIs available. Need {required}, "
            f"but only {available} available after filtering.",
            {"required": required, "available": available},
        )
        self.required = required
        self.available = available


class InsufficientCategories(MashupError):
    error_code = "INSUFFICIENT_CATEGORIES"
    status_code = 400

    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            f"Insufficient categories available. Need {required} different categories, "
            f"but only {available} available after filtering.",
            {"required": required, "available": available},
        )
        self.required = required
        self.available = available


class DuplicateSelection(MashupError):
    error_code = "DUPLICATE_SELECTION"
    status_code = 400

    def __init__(self, api_ids: list[str]) -> None:
        super().__init__("Duplicate APIs selected", {"apiIds": api_ids})


class SelectionInvariantError(MashupError):
    """A selection came out with repeated ids or categories. Always a bug."""

    error_code = "SELECTION_INVARIANT_VIOLATED"


# -- Generation stages ----------------------------------------------------

class IdeaGenerationError(MashupError):
    error_code = "IDEA_GENERATION_ERROR"


class CodeGenerationError(MashupError):
    error_code = "CODE_GENERATION_ERROR"


class ZipCreationError(MashupError):
    error_code = "ZIP_CREATION_ERROR"


# -- Downloads ------------------------------------------------------------

class InvalidFilename(MashupError):
    error_code = "INVALID_FILENAME"
    status_code = 400

    def __init__(self, filename: str) -> None:
        super().__init__("Invalid filename provided", {"filename": filename})


class FileNotFound(MashupError):
    error_code = "FILE_NOT_FOUND"
    status_code = 404

    def __init__(self, filename: str) -> None:
        super().__init__(
            "The requested file does not exist or has expired",
            {"filename": filename},
        )
