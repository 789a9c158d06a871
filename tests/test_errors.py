import pytest

from mashup_maker.core.errors import (
    AlreadyExists,
    CodeGenerationError,
    InsufficientCandidates,
    InsufficientCategories,
    InvalidFilename,
    MashupError,
    NotFound,
    RegistryUnavailable,
)
from mashup_maker.core.result import Err, Ok, attempt, attempt_async


@pytest.mark.parametrize("exc, code, status", [
    (RegistryUnavailable("x"), "API_REGISTRY_ERROR", 500),
    (AlreadyExists("a"), "DUPLICATE_API", 409),
    (NotFound("a"), "API_NOT_FOUND", 404),
    (InsufficientCandidates(3, 1), "INSUFFICIENT_APIS", 400),
    (InsufficientCategories(3, 2), "INSUFFICIENT_CATEGORIES", 400),
    (CodeGenerationError("boom"), "CODE_GENERATION_ERROR", 500),
    (InvalidFilename("../x"), "INVALID_FILENAME", 400),
])
def test_codes_and_statuses(exc, code, status):
    assert isinstance(exc, MashupError)
    assert exc.error_code == code
    assert exc.status_code == status


def test_insufficiency_details():
    exc = InsufficientCategories(3, 1)
    assert exc.details == {"required": 3, "available": 1}
    assert str(exc).startswith("INSUFFICIENT_CATEGORIES: ")


def test_attempt_wraps_exceptions():
    assert attempt("s", lambda x: x * 2, 21) == Ok(42)

    result = attempt("idea", lambda: 1 / 0)
    assert isinstance(result, Err)
    assert result.stage == "idea"
    assert isinstance(result.error, ZeroDivisionError)


async def test_attempt_async_wraps_exceptions():
    async def fails():
        raise CodeGenerationError("nope")

    async def works(value):
        return value

    assert await attempt_async("export", works, "ok") == Ok("ok")
    result = await attempt_async("export", fails)
    assert isinstance(result, Err)
    assert result.message == "nope"
