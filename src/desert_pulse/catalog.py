"""
Static workout plan catalog.

Plans are keyed by (goal, energy_level). The table is built once at import
and never changes afterwards; lookups of a missing combination return an
empty tuple rather than raising.
"""
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from desert_pulse.models import ExerciseTemplate

PlanTable = Mapping[str, Mapping[str, Tuple[ExerciseTemplate, ...]]]


class PlanCatalog:
    """Read-only mapping of goal -> energy level -> exercise templates."""

    def __init__(self, plans: Dict[str, Dict[str, Iterable[Any]]]):
        table = {}
        for goal, levels in plans.items():
            table[goal] = MappingProxyType({
                level: tuple(
                    t if isinstance(t, ExerciseTemplate) else ExerciseTemplate(**t)
                    for t in templates
                )
                for level, templates in levels.items()
            })
        self._plans: PlanTable = MappingProxyType(table)

    def lookup(self, goal: str, energy_level: str) -> Tuple[ExerciseTemplate, ...]:
        """Return the templates for a combination, or () when there is none."""
        levels = self._plans.get(goal)
        if levels is None:
            return ()
        return levels.get(energy_level, ())

    def goals(self) -> List[str]:
        return list(self._plans)

    def energy_levels(self, goal: str) -> List[str]:
        return list(self._plans.get(goal, {}))


WORKOUT_PLANS: Dict[str, Dict[str, List[Dict[str, Any]]]] = {
    "strength": {
        "high": [
            {"name": "Push-ups", "set_duration_minutes": 3, "sets": 3, "reps": 15},
            {"name": "Squats", "set_duration_minutes": 3, "sets": 3, "reps": 20},
            {"name": "Plank", "set_duration_minutes": 2, "sets": 3, "reps": "60 sec"},
        ],
        "medium": [
            {"name": "Push-ups", "set_duration_minutes": 2, "sets": 2, "reps": 10},
            {"name": "Squats", "set_duration_minutes": 2, "sets": 2, "reps": 15},
        ],
        "low": [
            {"name": "Wall Push-ups", "set_duration_minutes": 2, "sets": 2, "reps": 8},
        ],
    },
    "endurance": {
        "high": [
            {"name": "Jumping Jacks", "set_duration_minutes": 3, "sets": 3, "reps": 30},
        ],
        "medium": [
            {"name": "Jumping Jacks", "set_duration_minutes": 2, "sets": 2, "reps": 20},
        ],
        "low": [
            {"name": "March in Place", "set_duration_minutes": 3, "sets": 2, "reps": "60 sec"},
        ],
    },
    "flexibility": {
        "high": [
            {"name": "Deep Lunges", "set_duration_minutes": 3, "sets": 3, "reps": "45 sec hold"},
        ],
        "medium": [
            {"name": "Standing Quad Stretch", "set_duration_minutes": 2, "sets": 2, "reps": "30 sec each"},
        ],
        "low": [
            {"name": "Neck Rolls", "set_duration_minutes": 2, "sets": 2, "reps": 10},
        ],
    },
    "weight_loss": {
        "high": [
            {"name": "Burpees", "set_duration_minutes": 3, "sets": 3, "reps": 12},
        ],
        "medium": [
            {"name": "Squats", "set_duration_minutes": 2, "sets": 3, "reps": 15},
        ],
        "low": [
            {"name": "Walking in Place", "set_duration_minutes": 3, "sets": 2, "reps": "90 sec"},
        ],
    },
}

DEFAULT_CATALOG = PlanCatalog(WORKOUT_PLANS)


def get_catalog() -> PlanCatalog:
    """FastAPI dependency."""
    return DEFAULT_CATALOG
