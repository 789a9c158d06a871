"""Template-based app concept synthesis.

All choices (name pattern, sentence and feature counts) are derived from
the API ids, so the same three APIs always produce the same idea.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from mashup_maker.core.errors import IdeaGenerationError
from mashup_maker.generators.base import IdeaSynthesizer
from mashup_maker.models import APIDescriptor, AppIdea

logger = logging.getLogger(__name__)

REQUIRED_APIS = 3

_NAME_NOISE = re.compile(r"\s*(API|Service|Platform)\s*", re.IGNORECASE)
_SENTENCE_BREAKS = re.compile(r"[.!?;]")

CATEGORY_ACTIONS = {
    "weather": "tracks weather conditions",
    "music": "plays and discovers music",
    "maps": "provides location services",
    "news": "delivers news updates",
    "finance": "monitors financial data",
    "sports": "tracks sports events",
    "food": "discovers recipes and restaurants",
    "travel": "plans travel itineraries",
    "social": "connects people",
    "entertainment": "provides entertainment content",
    "productivity": "enhances productivity",
    "health": "monitors health metrics",
    "education": "facilitates learning",
    "gaming": "provides gaming experiences",
}


def _theme(api: APIDescriptor) -> str:
    return _NAME_NOISE.sub(" ", api.name).strip() or api.name


def _clean(text: str) -> str:
    # Keeps generated sentences from being split by punctuation in API names
    return _SENTENCE_BREAKS.sub("", text).strip() or "API"


def _action(category: str) -> str:
    return CATEGORY_ACTIONS.get(category.lower(), f"integrates {_clean(category)} data")


class TemplateIdeaGenerator(IdeaSynthesizer):
    """Fills fixed sentence templates with the APIs' names and categories."""

    def generate_idea(self, apis: Sequence[APIDescriptor]) -> AppIdea:
        if len(apis) != REQUIRED_APIS:
            raise IdeaGenerationError(
                f"Exactly {REQUIRED_APIS} APIs are required for idea generation",
                {"providedCount": len(apis)},
            )
        apis = list(apis)
        idea = AppIdea(
            app_name=self.generate_app_name(apis),
            description=self.generate_description(apis),
            features=self.generate_features(apis),
            rationale=self.generate_rationale(apis),
            apis=apis,
        )
        logger.info("App idea generated: %s", idea.app_name)
        return idea

    def generate_app_name(self, apis: Sequence[APIDescriptor]) -> str:
        t1, t2, t3 = (_theme(a) for a in apis)
        patterns = [
            f"{t1} {t2} {t3}",
            f"{t1}-Powered {t2}",
            f"{t3} {t1} Hub",
            f"Smart{t2} with {t1}",
            f"{t1} {t3} Connect",
            f"{t2}{t3} Explorer",
            f"The {t1} {t2} App",
            f"{t3}-Enhanced {t1}",
        ]
        index = (ord(apis[0].id[0]) + ord(apis[1].id[0])) % len(patterns)
        return patterns[index]

    def generate_description(self, apis: Sequence[APIDescriptor]) -> str:
        """Two to four sentences."""
        a1, a2, a3 = apis
        n1, n2, n3 = (_clean(a.name) for a in apis)
        c1, c2, c3 = (_clean(a.category) for a in apis)
        sentences = [
            f"This application combines {n1}, {n2}, and {n3} into a single experience.",
            f"The app {_action(a1.category)} using {n1}, {_action(a2.category)} "
            f"through {n2}, and {_action(a3.category)} via {n3}.",
            "Users work with all three services in one interface, "
            "building workflows none of them offers alone.",
            f"Used together, these APIs open up new ways to combine "
            f"{c1}, {c2}, and {c3} data.",
        ]
        count = 2 + (len(a1.id) + len(a2.id)) % 3
        return " ".join(sentences[:count])

    def generate_features(self, apis: Sequence[APIDescriptor]) -> list[str]:
        """Three to five features, each touching at least one API."""
        a1, a2, a3 = apis
        features = [
            f"Real-time {a1.category} data integration powered by {a1.name}",
            f"Interactive {a2.category} features using {a2.name} endpoints",
            f"{a3.category.capitalize()} capabilities through {a3.name} integration",
            f"Cross-source views combining {a1.name} and {a2.name} data",
            f"Recommendations based on {a2.name} and {a3.name} insights",
            f"Unified dashboard for {a1.category}, {a2.category}, and {a3.category} information",
            f"Automated workflows connecting {a1.name}, {a2.name}, and {a3.name}",
        ]
        count = 3 + (len(a1.id) + len(a3.id)) % 3
        return features[:count]

    def generate_rationale(self, apis: Sequence[APIDescriptor]) -> str:
        a1, a2, a3 = apis
        statements = [
            f"{a1.name} and {a2.name} form a natural workflow where "
            f"{a1.category} data enriches {a2.category} features.",
            f"{a3.name} adds {a3.category} context that makes both the "
            f"{a1.category} and {a2.category} features more useful.",
            f"Users who need {a1.category} services often benefit from "
            f"{a2.category} and {a3.category} capabilities as well.",
        ]
        count = 2 + len(a2.id) % 2
        return " ".join(statements[:count])
