"""JSON API routes for plans, composed workouts and progress."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from desert_pulse.auth import require_api_account
from desert_pulse.catalog import PlanCatalog, get_catalog
from desert_pulse.models import (
    CompleteSessionRequest,
    ComposedWorkout,
    ComposeRequest,
    ProgressRecord,
    User,
)
from desert_pulse.services.progress_ledger import ProgressValidationError, new_progress
from desert_pulse.services.progress_store import (
    ProgressConflictError,
    ProgressStore,
    ProgressStoreError,
    complete_session,
    get_progress_store,
)
from desert_pulse.services.workout_composer import compose, nominal_duration

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health():
    """Health check endpoint."""
    return {"ok": True}


@router.get("/api/plans/{goal}/{energy_level}", tags=["Plans"])
def get_plan(goal: str, energy_level: str, catalog: PlanCatalog = Depends(get_catalog)):
    """Return a catalog entry as stored, without time scaling."""
    templates = catalog.lookup(goal, energy_level)
    if not templates:
        raise HTTPException(status_code=404, detail=f"No plan for {goal}/{energy_level}")
    return {
        "goal": goal,
        "energy_level": energy_level,
        "exercises": [t.model_dump() for t in templates],
        "nominal_duration_minutes": nominal_duration(templates),
    }


@router.post("/api/workouts/compose", response_model=ComposedWorkout, tags=["Plans"])
def compose_workout(
    request: ComposeRequest,
    user: User = Depends(require_api_account),
    catalog: PlanCatalog = Depends(get_catalog),
):
    """Compose a workout for the current user's goal and available time."""
    return compose(user.goal, user.available_time_minutes, request.energy_level, catalog)


@router.get("/api/progress", response_model=ProgressRecord, tags=["Progress"])
def get_progress(
    user: User = Depends(require_api_account),
    progress: ProgressStore = Depends(get_progress_store),
):
    return progress.get(user.id) or new_progress(user.id)


@router.post("/api/progress/sessions", response_model=ProgressRecord, tags=["Progress"])
def record_completed_session(
    request: CompleteSessionRequest,
    user: User = Depends(require_api_account),
    progress: ProgressStore = Depends(get_progress_store),
):
    """Record a completed session and return the updated progress."""
    try:
        return complete_session(
            progress,
            user.id,
            request.date or datetime.now(timezone.utc),
            request.workout_type,
            request.duration_minutes,
            request.energy_level,
        )
    except ProgressValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ProgressConflictError:
        raise HTTPException(status_code=409, detail="Progress was updated concurrently, please retry")
    except ProgressStoreError as e:
        logger.error("Could not store session for user %s: %s", user.id, e)
        raise HTTPException(status_code=503, detail="Progress storage unavailable")
