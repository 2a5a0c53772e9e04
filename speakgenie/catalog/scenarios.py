"""Static catalog of conversation practice scenarios."""

from __future__ import annotations

from ..models.datatypes import Scenario


FREE_CHAT_SCENARIO_ID = "free-chat"

SCENARIOS: tuple[Scenario, ...] = (
    Scenario(
        id="school",
        name="SCHOOL",
        description="Classroom conversations and presentations",
        examples=(
            "Asking questions in class",
            "Giving presentations",
            "Talking to teachers",
            "Making friends",
        ),
    ),
    Scenario(
        id="store",
        name="STORE",
        description="Shopping and customer service interactions",
        examples=(
            "Asking about products",
            "Checking prices",
            "Making purchases",
            "Getting help from staff",
        ),
    ),
    Scenario(
        id="restaurant",
        name="RESTAURANT",
        description="Ordering food and dining etiquette",
        examples=(
            "Ordering meals",
            "Asking about menu items",
            "Making special requests",
            "Paying the bill",
        ),
    ),
    Scenario(
        id="airport",
        name="AIRPORT",
        description="Travel and navigation conversations",
        examples=(
            "Checking in for flights",
            "Going through security",
            "Asking for directions",
            "Handling luggage",
        ),
    ),
    Scenario(
        id="home",
        name="HOME",
        description="Family conversations and daily routines",
        examples=(
            "Talking with family",
            "Discussing daily activities",
            "Planning weekend fun",
            "Sharing stories",
        ),
    ),
)


def get_scenario_by_id(scenario_id: str) -> Scenario | None:
    """Return the scenario with the given id, if any."""

    return next((scenario for scenario in SCENARIOS if scenario.id == scenario_id), None)


def is_known_scenario(scenario_id: str) -> bool:
    """Return whether a scenario id is selectable, including free chat."""

    return scenario_id == FREE_CHAT_SCENARIO_ID or get_scenario_by_id(scenario_id) is not None
