"""Fit a catalog plan into a user's available time."""
import logging
from typing import Iterable

from desert_pulse.catalog import DEFAULT_CATALOG, PlanCatalog
from desert_pulse.models import ComposedWorkout, ExerciseTemplate, Minutes
from desert_pulse.utils import round_half_up

logger = logging.getLogger(__name__)


def nominal_duration(templates: Iterable[ExerciseTemplate]) -> Minutes:
    """Sum of set duration x sets, before any scaling."""
    return sum(t.set_duration_minutes * t.sets for t in templates)


def compose(
    goal: str,
    available_time_minutes: Minutes,
    energy_level: str,
    catalog: PlanCatalog = DEFAULT_CATALOG,
) -> ComposedWorkout:
    """
    Build a workout for a goal and energy level within a time budget.

    When the nominal plan is longer than the budget every exercise's set count
    is scaled by available/nominal and rounded half up, keeping at least one
    set. The recomputed total can therefore still exceed the budget slightly.

    An unknown goal or energy level yields an empty workout with total 0.
    """
    templates = catalog.lookup(goal, energy_level)
    if not templates:
        logger.debug("No plan for goal=%s energy_level=%s", goal, energy_level)
        return ComposedWorkout(goal=goal, energy_level=energy_level)

    nominal = nominal_duration(templates)
    if nominal <= available_time_minutes:
        exercises = list(templates)
    else:
        ratio = available_time_minutes / nominal
        exercises = [
            t.model_copy(update={"sets": max(1, round_half_up(t.sets * ratio))})
            for t in templates
        ]
        logger.debug(
            "Scaled %s/%s plan from %s to fit %s minutes (ratio %.3f)",
            goal, energy_level, nominal, available_time_minutes, ratio,
        )

    return ComposedWorkout(
        goal=goal,
        energy_level=energy_level,
        exercises=exercises,
        total_duration_minutes=nominal_duration(exercises),
    )
