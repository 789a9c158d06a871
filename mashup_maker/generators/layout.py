"""Screen, component, and navigation suggestions derived from API categories."""

from __future__ import annotations

import re
from collections.abc import Sequence

from mashup_maker.generators.base import LayoutSuggester
from mashup_maker.generators.naming import unique_names
from mashup_maker.models import (
    APIDescriptor, AppIdea, ComponentSuggestion, FlowStep, InteractionFlow,
    Screen, UILayout,
)

DASHBOARD = "Dashboard"

_API_WORD = re.compile(r"\s*API\s*", re.IGNORECASE)

SCREEN_COMPONENTS: dict[str, list[str]] = {
    "weather": ["Weather Card", "Temperature Display", "Forecast List", "Location Selector"],
    "music": ["Music Player", "Playlist", "Track List", "Search Bar"],
    "maps": ["Map View", "Location Marker", "Search Input", "Directions Panel"],
    "news": ["Article List", "Article Card", "Category Filter", "Search Bar"],
    "finance": ["Stock Chart", "Price Display", "Ticker List", "Portfolio Summary"],
    "sports": ["Score Card", "Team List", "Match Schedule", "Statistics Panel"],
    "food": ["Recipe Card", "Ingredient List", "Search Bar", "Nutrition Info"],
    "movies": ["Movie Card", "Movie List", "Search Bar", "Rating Display"],
    "books": ["Book Card", "Book List", "Search Bar", "Author Info"],
    "games": ["Game Card", "Leaderboard", "Player Stats", "Search Bar"],
    "social": ["Post Feed", "User Profile", "Comment Section", "Share Button"],
    "productivity": ["Task List", "Calendar View", "Form Input", "Status Indicator"],
    "health": ["Health Metrics", "Chart Display", "Activity Log", "Goal Tracker"],
    "travel": ["Destination Card", "Map View", "Booking Form", "Itinerary List"],
    "education": ["Course List", "Lesson Card", "Progress Tracker", "Quiz Component"],
}
GENERIC_SCREEN_COMPONENTS = ["Data Display Card", "List View", "Search/Filter Bar", "Detail Panel"]

# (component type, purpose) per category
CATEGORY_COMPONENTS: dict[str, list[tuple[str, str]]] = {
    "weather": [
        ("card", "Display current weather conditions"),
        ("list", "Show weather forecast for upcoming days"),
        ("chart", "Visualize temperature trends"),
    ],
    "music": [
        ("player", "Play audio tracks"),
        ("list", "Display playlists and tracks"),
        ("card", "Show album or artist information"),
    ],
    "maps": [
        ("map", "Display geographic locations"),
        ("form", "Input location search queries"),
        ("list", "Show nearby places or directions"),
    ],
    "news": [
        ("list", "Display news articles"),
        ("card", "Show article preview with image"),
        ("form", "Filter news by category or search"),
    ],
    "finance": [
        ("chart", "Display stock price trends"),
        ("card", "Show current stock prices and changes"),
        ("list", "List portfolio holdings"),
    ],
    "sports": [
        ("card", "Display game scores and team info"),
        ("list", "Show match schedules"),
        ("chart", "Visualize player or team statistics"),
    ],
    "food": [
        ("card", "Display recipe with image"),
        ("list", "Show ingredients and instructions"),
        ("form", "Search recipes by ingredients"),
    ],
    "movies": [
        ("card", "Display movie poster and details"),
        ("list", "Show movie listings"),
        ("form", "Search movies by title or genre"),
    ],
    "social": [
        ("list", "Display social media feed"),
        ("card", "Show individual posts"),
        ("form", "Create new posts or comments"),
    ],
    "productivity": [
        ("list", "Display tasks or calendar events"),
        ("form", "Create or edit tasks"),
        ("card", "Show task details"),
    ],
}


class UILayoutSuggester(LayoutSuggester):
    """A dashboard plus one screen per API, linked both ways."""

    def generate_layout(self, idea: AppIdea) -> UILayout:
        screens = self.suggest_screens(idea.apis)
        return UILayout(
            screens=screens,
            components=self.suggest_components(idea.apis),
            interaction_flow=self.suggest_interaction_flow(screens),
        )

    def suggest_screens(self, apis: Sequence[APIDescriptor]) -> list[Screen]:
        screens = [Screen(
            name=DASHBOARD,
            description="Main landing page displaying overview of all integrated APIs",
            components=[
                "Navigation Bar", "Header",
                *(f"{api.name} Overview" for api in apis),
                "Footer",
            ],
        )]
        names = unique_names(
            (self.screen_name(api) for api in apis),
            suffix=lambda n, i: f"{n} {i + 1}",
        )
        for api, name in zip(apis, names):
            screens.append(Screen(
                name=name,
                description=(
                    f"Screen dedicated to {api.name} functionality, "
                    f"displaying {api.description.lower()}"
                ),
                components=[
                    "Navigation Bar",
                    *SCREEN_COMPONENTS.get(api.category_key, GENERIC_SCREEN_COMPONENTS),
                    "Loading Indicator",
                    "Error Message Display",
                ],
            ))
        return screens

    @staticmethod
    def screen_name(api: APIDescriptor) -> str:
        return f"{_API_WORD.sub(' ', api.name, count=1).strip() or api.name} Screen"

    def suggest_components(self, apis: Sequence[APIDescriptor]) -> list[ComponentSuggestion]:
        suggestions: list[ComponentSuggestion] = []
        for api in apis:
            entries = CATEGORY_COMPONENTS.get(api.category_key) or [
                ("card", f"Display {api.name} data"),
                ("list", f"List {api.name} items"),
                ("form", f"Input parameters for {api.name}"),
            ]
            suggestions.extend(
                ComponentSuggestion(type=kind, purpose=purpose, api_source=api.name)
                for kind, purpose in entries
            )
        return suggestions

    def suggest_interaction_flow(self, screens: Sequence[Screen]) -> InteractionFlow:
        if not screens:
            return InteractionFlow()

        dashboard = next((s for s in screens if s.name == DASHBOARD), screens[0])
        features = [s for s in screens if s.name != dashboard.name]

        steps: list[FlowStep] = []
        for screen in features:
            steps.append(FlowStep(
                source=dashboard.name, target=screen.name,
                action=f"Click on {screen.name} navigation item or card",
            ))
            steps.append(FlowStep(
                source=screen.name, target=dashboard.name,
                action="Click back button or home navigation",
            ))
        for current, following in zip(features, features[1:]):
            steps.append(FlowStep(
                source=current.name, target=following.name,
                action="Navigate via menu or related content link",
            ))
        return InteractionFlow(steps=steps)
