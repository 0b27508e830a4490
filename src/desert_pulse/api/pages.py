"""Server-rendered pages: accounts, dashboard and workout generation."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from desert_pulse.auth import get_optional_user, require_page_account
from desert_pulse.catalog import PlanCatalog, get_catalog
from desert_pulse.config import settings
from desert_pulse.models import ENERGY_LEVELS, GOALS, User
from desert_pulse.security import create_session_token, hash_password, verify_password
from desert_pulse.services.progress_ledger import ProgressValidationError, new_progress
from desert_pulse.services.progress_store import (
    ProgressStore,
    ProgressStoreError,
    complete_session,
    get_progress_store,
)
from desert_pulse.services.user_store import EmailAlreadyRegistered, UserStore, get_user_store
from desert_pulse.services.workout_composer import compose
from desert_pulse.utils import to_int

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

MIN_PASSWORD_LENGTH = 8

router = APIRouter(tags=["Pages"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _redirect(url: str) -> RedirectResponse:
    # 303 so a POST is followed by a GET
    return RedirectResponse(url, status_code=303)


def _set_session_cookie(response: RedirectResponse, user_id: str) -> None:
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=create_session_token(user_id),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=60 * 60 * 24 * settings.TOKEN_EXPIRE_DAYS,
    )


def _profile_errors(goal: str, available_time: Optional[int]) -> Optional[str]:
    if goal not in GOALS:
        return "Please choose a valid goal"
    if available_time is None or available_time <= 0:
        return "Available time must be a positive number of minutes"
    return None


def _render(request: Request, name: str, status_code: int = 200, **context):
    return templates.TemplateResponse(request, name, context, status_code=status_code)


# ---------------------------------------------------------------------------
# Landing / session
# ---------------------------------------------------------------------------


@router.get("/")
async def index(request: Request, user_id: Optional[str] = Depends(get_optional_user)):
    if user_id:
        return _redirect("/dashboard")
    return _render(request, "index.html")


@router.get("/login")
async def login_page(request: Request):
    return _render(request, "login.html", error=None)


@router.post("/login")
async def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    users: UserStore = Depends(get_user_store),
):
    user = users.get_by_email(email) if email else None
    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login attempt")
        return _render(request, "login.html", error="Invalid credentials", email=email)

    response = _redirect("/dashboard")
    _set_session_cookie(response, user.id)
    logger.info("User %s logged in", user.id)
    return response


@router.get("/signup")
async def signup_page(request: Request, catalog: PlanCatalog = Depends(get_catalog)):
    return _render(
        request, "signup.html", error=None, goals=catalog.goals(),
        form={"goal": "strength", "available_time": settings.DEFAULT_AVAILABLE_TIME},
    )


@router.post("/signup")
async def signup(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    goal: str = Form("strength"),
    available_time: str = Form(""),
    users: UserStore = Depends(get_user_store),
    progress: ProgressStore = Depends(get_progress_store),
    catalog: PlanCatalog = Depends(get_catalog),
):
    minutes = to_int(available_time) if available_time else settings.DEFAULT_AVAILABLE_TIME
    form = {"name": name, "email": email, "goal": goal, "available_time": available_time}

    error = None
    if not name.strip() or not email.strip():
        error = "Name and email are required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        error = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    else:
        error = _profile_errors(goal, minutes)
    if error:
        return _render(
            request, "signup.html", status_code=400,
            error=error, form=form, goals=catalog.goals(),
        )

    try:
        user = users.create(name, email, hash_password(password), goal, minutes)
    except EmailAlreadyRegistered:
        return _render(
            request, "signup.html", status_code=400,
            error="An account with that email already exists", form=form, goals=catalog.goals(),
        )
    if user is None:
        raise HTTPException(status_code=503, detail="Account storage unavailable")

    if progress.create(user.id) is None:
        # record_session starts from zero, so the account is still usable
        logger.warning("Could not create progress record for user %s", user.id)

    response = _redirect("/dashboard")
    _set_session_cookie(response, user.id)
    return response


@router.get("/logout")
async def logout():
    response = _redirect("/")
    response.delete_cookie(settings.COOKIE_NAME)
    return response


# ---------------------------------------------------------------------------
# Dashboard / profile
# ---------------------------------------------------------------------------


@router.get("/dashboard")
async def dashboard(
    request: Request,
    user: User = Depends(require_page_account),
    progress: ProgressStore = Depends(get_progress_store),
):
    record = progress.get(user.id) or new_progress(user.id)
    return _render(
        request, "dashboard.html",
        user=user, progress=record, error=request.query_params.get("error"),
    )


@router.get("/profile")
async def profile_page(
    request: Request,
    user: User = Depends(require_page_account),
    catalog: PlanCatalog = Depends(get_catalog),
):
    return _render(request, "profile.html", user=user, error=None, goals=catalog.goals())


@router.post("/profile")
async def update_profile(
    request: Request,
    goal: str = Form(""),
    available_time: str = Form(""),
    user: User = Depends(require_page_account),
    users: UserStore = Depends(get_user_store),
    catalog: PlanCatalog = Depends(get_catalog),
):
    minutes = to_int(available_time)
    error = _profile_errors(goal, minutes)
    if error:
        return _render(
            request, "profile.html", status_code=400,
            user=user, error=error, goals=catalog.goals(),
        )

    if not users.update_profile(user.id, goal, minutes):
        raise HTTPException(status_code=503, detail="Account storage unavailable")
    return _redirect("/dashboard")


# ---------------------------------------------------------------------------
# Workouts
# ---------------------------------------------------------------------------


@router.get("/workout")
async def workout_page(
    request: Request,
    user: User = Depends(require_page_account),
    catalog: PlanCatalog = Depends(get_catalog),
):
    return _render(request, "workout.html", user=user, energy_levels=catalog.energy_levels(user.goal))


@router.post("/workout/generate")
async def generate_workout(
    request: Request,
    energy_level: str = Form(""),
    user: User = Depends(require_page_account),
    catalog: PlanCatalog = Depends(get_catalog),
):
    if energy_level not in ENERGY_LEVELS:
        return _redirect("/workout")

    workout = compose(user.goal, user.available_time_minutes, energy_level, catalog)
    return _render(
        request, "workout_plan.html",
        user=user,
        workout=workout,
        energy_level=energy_level,
        total_duration=workout.total_duration_minutes,
    )


@router.post("/workout/complete")
async def complete_workout(
    energy_level: str = Form(""),
    user: User = Depends(require_page_account),
    progress: ProgressStore = Depends(get_progress_store),
    catalog: PlanCatalog = Depends(get_catalog),
):
    """Record the workout the server would compose now; only the energy level is taken from the form."""
    if energy_level not in ENERGY_LEVELS:
        return _redirect("/workout")

    workout = compose(user.goal, user.available_time_minutes, energy_level, catalog)
    if workout.is_empty:
        return _redirect("/workout")

    try:
        complete_session(
            progress,
            user.id,
            datetime.now(timezone.utc),
            workout.goal,
            workout.total_duration_minutes,
            energy_level,
        )
    except ProgressValidationError as e:
        logger.info("Rejected session for user %s: %s", user.id, e)
        return _redirect("/dashboard?error=Session+could+not+be+recorded")
    except ProgressStoreError as e:
        logger.error("Could not store session for user %s: %s", user.id, e)
        raise HTTPException(status_code=503, detail="Progress storage unavailable")

    return _redirect("/dashboard")
