"""Data models for workout plans, users and progress."""
from datetime import datetime
from typing import List, Literal, Optional, Union, get_args

from pydantic import BaseModel, Field

Goal = Literal['strength', 'endurance', 'flexibility', 'weight_loss']
EnergyLevel = Literal['high', 'medium', 'low']

GOALS = get_args(Goal)
ENERGY_LEVELS = get_args(EnergyLevel)

Minutes = Union[int, float]


class ExerciseTemplate(BaseModel):
    """A single exercise of a plan: how long one set takes and how many sets."""
    name: str
    set_duration_minutes: Minutes = Field(gt=0)
    sets: int = Field(ge=1)
    reps: Union[int, str]  # 15, or a hold such as '60 sec'

    class Config:
        frozen = True

    @property
    def duration_minutes(self) -> Minutes:
        return self.set_duration_minutes * self.sets


class ComposedWorkout(BaseModel):
    """A plan fitted to a time budget. Built per request, never stored."""
    goal: str
    energy_level: str
    exercises: List[ExerciseTemplate] = Field(default_factory=list)
    total_duration_minutes: Minutes = 0

    @property
    def is_empty(self) -> bool:
        return not self.exercises


class User(BaseModel):
    """A registered account as stored in the users table."""
    id: str
    name: str
    email: str
    password_hash: str
    goal: Goal = 'strength'
    available_time_minutes: int = Field(default=30, gt=0)
    created_at: Optional[datetime] = None

    class Config:
        extra = "ignore"  # Ignore store columns such as 'updated_at'


class SessionEntry(BaseModel):
    """One completed session in a user's history."""
    date: datetime
    workout_type: str
    duration_minutes: Minutes = Field(ge=0)
    energy_level: str

    class Config:
        frozen = True


class ProgressRecord(BaseModel):
    """
    Per-user progress snapshot.

    The counters are derived from ``history`` and only change through
    ``progress_ledger.record_session``:
    - completed_sessions == len(history)
    - total_minutes == sum of history durations
    """
    user_id: Optional[str] = None
    completed_sessions: int = Field(default=0, ge=0)
    streak: int = Field(default=0, ge=0)
    last_workout_date: Optional[datetime] = None
    total_minutes: Minutes = Field(default=0, ge=0)
    history: List[SessionEntry] = Field(default_factory=list)

    class Config:
        extra = "ignore"


class ComposeRequest(BaseModel):
    """Body of the JSON compose endpoint."""
    energy_level: EnergyLevel


class CompleteSessionRequest(BaseModel):
    """Body of the JSON session completion endpoint."""
    workout_type: str
    duration_minutes: Minutes
    energy_level: EnergyLevel
    date: Optional[datetime] = None
