"""Constrained-random API selection: unique ids, one API per category."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Sequence
from typing import TypeVar

from mashup_maker.core.errors import (
    DuplicateSelection,
    InsufficientCandidates,
    InsufficientCategories,
    NotFound,
    SelectionInvariantError,
)
from mashup_maker.core.registry import APIRegistry
from mashup_maker.models import APIDescriptor, SelectionCriteria

module_logger = logging.getLogger(__name__)

T = TypeVar("T")

SelectionResult = tuple[APIDescriptor, ...]


class APISelector:
    """
    Picks APIs from the registry under SelectionCriteria.

    Randomness comes from the injected `random.Random`, so a seeded
    selector reproduces its picks exactly.
    """

    def __init__(
        self,
        registry: APIRegistry,
        rng: random.Random | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.registry = registry
        self._rng = rng or random.Random()
        self._log = logger or module_logger

    def select(self, count: int = 3, criteria: SelectionCriteria | None = None) -> SelectionResult:
        """
        Select `count` APIs, each from a different category.

        Raises InsufficientCandidates / InsufficientCategories when the
        filtered catalog cannot satisfy the request.
        """
        candidates = self.filter_candidates(self.registry.get_all(), criteria)

        if len(candidates) < count:
            self._log.warning(
                "Insufficient APIs for selection: required=%d available=%d",
                count, len(candidates),
            )
            raise InsufficientCandidates(count, len(candidates))

        buckets = self._group_by_category(candidates)
        if len(buckets) < count:
            self._log.warning(
                "Insufficient categories for selection: required=%d available=%d",
                count, len(buckets),
            )
            raise InsufficientCategories(count, len(buckets))

        categories = self._shuffled(list(buckets))[:count]
        selected = tuple(self._pick(buckets[c]) for c in categories)

        self._check_invariants(selected)
        self._log.info(
            "Selected %d APIs: %s", len(selected),
            ", ".join(f"{a.id} ({a.category})" for a in selected),
        )
        return selected

    def select_by_ids(self, api_ids: Sequence[str]) -> SelectionResult:
        """Select exactly the given ids, in order. No randomness."""
        selected: list[APIDescriptor] = []
        for api_id in api_ids:
            api = self.registry.get_by_id(api_id)
            if api is None:
                self._log.warning("API not found for manual selection: %s", api_id)
                raise NotFound(api_id)
            selected.append(api)

        if not self.ensure_uniqueness(selected):
            self._log.warning("Duplicate APIs in manual selection: %s", list(api_ids))
            raise DuplicateSelection(list(api_ids))

        self._log.info("Selected %d specific APIs", len(selected))
        return tuple(selected)

    @staticmethod
    def filter_candidates(
        apis: Iterable[APIDescriptor], criteria: SelectionCriteria | None,
    ) -> list[APIDescriptor]:
        candidates = list(apis)
        if criteria is None:
            return candidates

        if criteria.exclude_categories:
            excluded = {c.lower() for c in criteria.exclude_categories}
            candidates = [a for a in candidates if a.category_key not in excluded]

        # Regeneration: drop everything returned by a prior call
        if criteria.exclude_api_ids:
            candidates = [a for a in candidates if a.id not in criteria.exclude_api_ids]

        if criteria.cors_only:
            candidates = [a for a in candidates if a.cors_compatible]

        if criteria.require_auth is not None:
            candidates = [a for a in candidates if a.requires_auth == criteria.require_auth]

        return candidates

    # -- Invariants ------------------------------------------------------

    @staticmethod
    def ensure_uniqueness(apis: Iterable[APIDescriptor]) -> bool:
        seen: set[str] = set()
        for api in apis:
            if api.id in seen:
                return False
            seen.add(api.id)
        return True

    @staticmethod
    def ensure_diversity(apis: Iterable[APIDescriptor]) -> bool:
        seen: set[str] = set()
        for api in apis:
            if api.category_key in seen:
                return False
            seen.add(api.category_key)
        return True

    def _check_invariants(self, selected: SelectionResult) -> None:
        ids = [a.id for a in selected]
        if not self.ensure_uniqueness(selected):
            self._log.error("Selection violated id uniqueness: %s", ids)
            raise SelectionInvariantError("Failed to ensure uniqueness of selected APIs", {"apiIds": ids})
        if not self.ensure_diversity(selected):
            self._log.error("Selection violated category diversity: %s", ids)
            raise SelectionInvariantError("Failed to ensure diversity of selected APIs", {"apiIds": ids})

    # -- Catalog views ---------------------------------------------------

    def available_categories(self) -> list[str]:
        return sorted({a.category for a in self.registry.get_all()})

    def apis_by_category(self) -> dict[str, list[APIDescriptor]]:
        grouped: dict[str, list[APIDescriptor]] = {}
        for api in self.registry.get_all():
            grouped.setdefault(api.category, []).append(api)
        return grouped

    # -- Randomness ------------------------------------------------------

    @staticmethod
    def _group_by_category(apis: Iterable[APIDescriptor]) -> dict[str, list[APIDescriptor]]:
        buckets: dict[str, list[APIDescriptor]] = {}
        for api in apis:
            buckets.setdefault(api.category_key, []).append(api)
        return buckets

    def _shuffled(self, items: list[T]) -> list[T]:
        """Fisher-Yates, walking down from the last index."""
        shuffled = list(items)
        for i in range(len(shuffled) - 1, 0, -1):
            j = self._rng.randrange(i + 1)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled

    def _pick(self, items: Sequence[T]) -> T:
        return items[self._rng.randrange(len(items))]
