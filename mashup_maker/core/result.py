"""Stage results: a closed `Ok | Err` union.

Collaborators are free to raise. The pipeline runs each stage through
`attempt()` / `attempt_async()`, which fold any exception into an `Err`,
and then branches on the variant instead of nesting try blocks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Err:
    stage: str
    error: Exception

    @property
    def message(self) -> str:
        return getattr(self.error, "message", None) or str(self.error)


StageResult = Union[Ok[T], Err]


def attempt(stage: str, fn: Callable[..., T], *args: Any) -> StageResult[T]:
    try:
        return Ok(fn(*args))
    except Exception as exc:
        return Err(stage, exc)


async def attempt_async(
    stage: str, fn: Callable[..., Awaitable[T]], *args: Any,
) -> StageResult[T]:
    try:
        return Ok(await fn(*args))
    except Exception as exc:
        return Err(stage, exc)
