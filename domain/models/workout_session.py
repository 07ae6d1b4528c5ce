"""
WorkoutSession aggregate root - the main domain entity of the engine.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

from domain.clock import utc_now
from domain.exceptions import ExerciseNotFound, GroupNotFound
from domain.models.exercise_group import SessionExerciseGroup
from domain.models.session_exercise import SessionExercise
from domain.models.template import WorkoutType


class SessionState(str, Enum):
    """
    Lifecycle state of a workout session.

    - ACTIVE: Being performed
    - PAUSED: Temporarily suspended, still counts as the open session
    - COMPLETED: Ended and retained for history

    Cancelled sessions are deleted, so there is no cancelled state.
    """

    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"

    @property
    def is_open(self) -> bool:
        """Active and paused sessions block starting another one."""
        return self in (SessionState.ACTIVE, SessionState.PAUSED)


class WorkoutSession(BaseModel):
    """
    Aggregate root for one training session.

    The session owns its exercises, their sets and (for superset/circuit
    workouts) its exercise groups. It is immutable: every domain method
    returns a new instance, so a child change can never be forgotten on the
    way up to the root.

    Ungrouped exercises live in ``exercises``. Members of a superset/circuit
    live only inside their ``exercise_groups`` entry; ``all_exercises`` gives
    the combined view.

    Examples:
        >>> session = WorkoutSession(
        ...     template_id="tpl-1",
        ...     template_name="Push Day",
        ...     exercises=[bench, overhead_press],
        ... )
        >>> session.state
        <SessionState.ACTIVE: 'active'>

        >>> paused = session.with_state(SessionState.PAUSED)
        >>> session.state  # original unchanged
        <SessionState.ACTIVE: 'active'>
    """

    # Identity
    id: str = Field(default_factory=lambda: str(uuid4()))
    template_id: Optional[str] = Field(default=None, description="Originating template")
    template_name: Optional[str] = Field(default=None, max_length=200)
    workout_type: WorkoutType = Field(default=WorkoutType.STANDARD)

    # Timing and state
    start_date: datetime = Field(default_factory=utc_now)
    end_date: Optional[datetime] = None
    state: SessionState = Field(default=SessionState.ACTIVE)

    # Structure
    exercises: List[SessionExercise] = Field(default_factory=list)
    exercise_groups: Optional[List[SessionExerciseGroup]] = None

    # External sync
    health_session_id: Optional[str] = Field(
        default=None, description="Correlation id from the health-data exporter"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_end_date_matches_state(self) -> "WorkoutSession":
        """A completed session has an end date; an open one does not."""
        if self.state == SessionState.COMPLETED and self.end_date is None:
            raise ValueError("Completed session must have an end_date")
        if self.state.is_open and self.end_date is not None:
            raise ValueError(f"{self.state.value} session must not have an end_date")
        return self

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self.state.is_open

    @property
    def is_grouped(self) -> bool:
        return bool(self.exercise_groups)

    @property
    def sorted_exercises(self) -> List[SessionExercise]:
        """Ungrouped exercises in display order."""
        return sorted(self.exercises, key=lambda e: e.order_index)

    @property
    def sorted_groups(self) -> List[SessionExerciseGroup]:
        return sorted(self.exercise_groups or [], key=lambda g: g.group_index)

    @property
    def all_exercises(self) -> List[SessionExercise]:
        """Ungrouped exercises followed by group members, in display order."""
        result = list(self.sorted_exercises)
        for group in self.sorted_groups:
            result.extend(group.exercises)
        return result

    @property
    def duration_seconds(self) -> float:
        """Elapsed time from start to end (or to now for an open session)."""
        end = self.end_date or utc_now()
        return max((end - self.start_date).total_seconds(), 0.0)

    @property
    def total_volume(self) -> float:
        """Weight x reps summed over completed working sets."""
        return sum(e.completed_volume for e in self.all_exercises)

    @property
    def total_set_count(self) -> int:
        return sum(e.set_count for e in self.all_exercises)

    @property
    def completed_set_count(self) -> int:
        return sum(e.completed_set_count for e in self.all_exercises)

    @property
    def progress(self) -> float:
        """Fraction of all sets completed (0.0 - 1.0)."""
        total = self.total_set_count
        return self.completed_set_count / total if total else 0.0

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def find_exercise(self, exercise_id: str) -> Optional[SessionExercise]:
        """Find an ungrouped exercise by session exercise id."""
        for exercise in self.exercises:
            if exercise.id == exercise_id:
                return exercise
        return None

    def find_group(self, group_id: str) -> Optional[SessionExerciseGroup]:
        for group in self.exercise_groups or []:
            if group.id == group_id:
                return group
        return None

    def group_containing(self, exercise_id: str) -> Optional[SessionExerciseGroup]:
        """Return the group that owns ``exercise_id``, if any."""
        for group in self.exercise_groups or []:
            if group.find_exercise(exercise_id) is not None:
                return group
        return None

    def require_exercise(self, exercise_id: str) -> SessionExercise:
        exercise = self.find_exercise(exercise_id)
        if exercise is None:
            raise ExerciseNotFound(exercise_id)
        return exercise

    def require_group(self, group_id: str) -> SessionExerciseGroup:
        group = self.find_group(group_id)
        if group is None:
            raise GroupNotFound(group_id)
        return group

    # -------------------------------------------------------------------------
    # Domain Methods (return new instances for immutability)
    # -------------------------------------------------------------------------

    def with_exercises(self, exercises: List[SessionExercise]) -> "WorkoutSession":
        return self.model_copy(update={"exercises": list(exercises)})

    def with_exercise(self, updated: SessionExercise) -> "WorkoutSession":
        """Return a new session with one ungrouped exercise replaced by id."""
        self.require_exercise(updated.id)
        return self.with_exercises(
            [updated if e.id == updated.id else e for e in self.exercises]
        )

    def with_group(self, updated: SessionExerciseGroup) -> "WorkoutSession":
        """Return a new session with one exercise group replaced by id."""
        self.require_group(updated.id)
        groups = [updated if g.id == updated.id else g for g in self.exercise_groups or []]
        return self.model_copy(update={"exercise_groups": groups})

    def with_state(
        self,
        state: SessionState,
        end_date: Optional[datetime] = None,
    ) -> "WorkoutSession":
        return self.model_copy(update={"state": state, "end_date": end_date})

    def with_health_session_id(self, health_session_id: Optional[str]) -> "WorkoutSession":
        return self.model_copy(update={"health_session_id": health_session_id})

    def exercise_order_conflicts(self) -> List[Tuple[int, int]]:
        """Return (order_index, count) pairs shared by more than one exercise."""
        counts = {}
        for exercise in self.exercises:
            counts[exercise.order_index] = counts.get(exercise.order_index, 0) + 1
        return sorted((index, n) for index, n in counts.items() if n > 1)

    def __str__(self) -> str:
        name = self.template_name or "Workout"
        return (
            f"WorkoutSession({name!r}, {self.state.value}, "
            f"{self.completed_set_count}/{self.total_set_count} sets)"
        )
