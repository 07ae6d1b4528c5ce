"""
Workout template value objects.

Templates are read-only input to session start. Editing them is handled
elsewhere; the engine only snapshots them into a session.
"""

from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator


class WorkoutType(str, Enum):
    """
    How the exercises of a workout are performed.

    - STANDARD: Straight sets, one exercise after another
    - SUPERSET: Pairs of exercises alternated for a number of rounds
    - CIRCUIT: Three or more stations rotated for a number of rounds
    """

    STANDARD = "standard"
    SUPERSET = "superset"
    CIRCUIT = "circuit"

    @property
    def is_grouped(self) -> bool:
        return self in (WorkoutType.SUPERSET, WorkoutType.CIRCUIT)


class TemplateExercise(BaseModel):
    """An exercise prescription inside a workout template."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    exercise_id: str = Field(..., min_length=1, description="Catalog exercise id")
    target_sets: int = Field(default=3, ge=1)
    target_reps: Optional[int] = Field(default=None, ge=0)
    target_time: Optional[float] = Field(
        default=None, ge=0, description="Target duration for time-based exercises"
    )
    target_weight: Optional[float] = Field(default=None, ge=0)
    rest_time: Optional[float] = Field(default=None, ge=0)
    per_set_rest_times: Optional[List[float]] = Field(
        default=None, description="Individual rest time per set, overrides rest_time"
    )
    order_index: int = Field(default=0, ge=0)
    notes: Optional[str] = None

    model_config = {"frozen": True}

    def rest_time_for_set(self, set_index: int) -> Optional[float]:
        """Rest time for one set, preferring the per-set value when present."""
        if self.per_set_rest_times is not None and set_index < len(self.per_set_rest_times):
            return self.per_set_rest_times[set_index]
        return self.rest_time


class TemplateExerciseGroup(BaseModel):
    """A superset/circuit group inside a workout template."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    exercises: List[TemplateExercise] = Field(..., min_length=1)
    group_index: int = Field(default=0, ge=0)
    rounds: int = Field(default=3, ge=1)
    rest_after_group: float = Field(default=120.0, ge=0)

    model_config = {"frozen": True}


class WorkoutTemplate(BaseModel):
    """
    A workout template a session is started from.

    Standard templates list their exercises directly; superset and circuit
    templates describe them through ``exercise_groups``.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(..., min_length=1, max_length=200)
    workout_type: WorkoutType = Field(default=WorkoutType.STANDARD)
    exercises: List[TemplateExercise] = Field(default_factory=list)
    exercise_groups: Optional[List[TemplateExerciseGroup]] = None
    default_rest_time: float = Field(default=90.0, ge=0)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_groups_for_type(self) -> "WorkoutTemplate":
        """Grouped workout types must come with at least one group."""
        if self.workout_type.is_grouped and not self.exercise_groups:
            raise ValueError(
                f"{self.workout_type.value} template must have exercise groups"
            )
        return self

    @property
    def catalog_exercise_ids(self) -> List[str]:
        """Every catalog id referenced by the template, in order, deduplicated."""
        seen = set()
        ids = []
        members = list(self.exercises)
        for group in self.exercise_groups or []:
            members.extend(group.exercises)
        for exercise in members:
            if exercise.exercise_id not in seen:
                seen.add(exercise.exercise_id)
                ids.append(exercise.exercise_id)
        return ids
