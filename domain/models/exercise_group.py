"""
SessionExerciseGroup entity - a superset or circuit tracked round by round.
"""

from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

from domain.models.session_exercise import SessionExercise


class SessionExerciseGroup(BaseModel):
    """
    An exercise group during an active superset/circuit session.

    Members are performed in rotation. Each member holds one set per round
    and the set for round ``r`` has ``order_index == r - 1``.

    - Superset: exactly two member exercises
    - Circuit: three or more member exercises ("stations")

    Examples:
        >>> group = SessionExerciseGroup(
        ...     exercises=[curls, pushdowns],
        ...     group_index=0,
        ...     current_round=1,
        ...     total_rounds=3,
        ...     rest_after_group=90,
        ... )
        >>> group.is_superset
        True
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    exercises: List[SessionExercise] = Field(..., min_length=1)
    group_index: int = Field(default=0, ge=0, description="Display order among groups")
    current_round: int = Field(default=1, ge=1, description="1-based current round")
    total_rounds: int = Field(default=3, ge=1)
    rest_after_group: float = Field(
        default=120.0, ge=0, description="Rest after the last member of a round"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_round_range(self) -> "SessionExerciseGroup":
        """Ensure 1 <= current_round <= total_rounds."""
        if self.current_round > self.total_rounds:
            raise ValueError(
                f"current_round ({self.current_round}) exceeds "
                f"total_rounds ({self.total_rounds})"
            )
        return self

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def exercise_count(self) -> int:
        return len(self.exercises)

    @property
    def is_superset(self) -> bool:
        return len(self.exercises) == 2

    @property
    def is_circuit(self) -> bool:
        return len(self.exercises) >= 3

    @property
    def round_set_index(self) -> int:
        """Set order index that belongs to the current round."""
        return self.current_round - 1

    @property
    def is_final_round(self) -> bool:
        return self.current_round >= self.total_rounds

    def is_round_complete(self, round_number: int) -> bool:
        """Check if every member completed its set for ``round_number``."""
        set_index = round_number - 1
        for exercise in self.exercises:
            round_set = exercise.set_at(set_index)
            if round_set is None or not round_set.completed:
                return False
        return True

    @property
    def round_progress(self) -> float:
        """Fraction of members that completed the current round (0.0 - 1.0)."""
        done = 0
        for exercise in self.exercises:
            round_set = exercise.set_at(self.round_set_index)
            if round_set is not None and round_set.completed:
                done += 1
        return done / len(self.exercises)

    @property
    def overall_progress(self) -> float:
        """Progress across all rounds (0.0 - 1.0)."""
        total = (self.current_round - 1) + self.round_progress
        return min(total / self.total_rounds, 1.0)

    @property
    def is_completed(self) -> bool:
        """On the final round with every member's final-round set completed."""
        return self.is_final_round and self.is_round_complete(self.current_round)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def find_exercise(self, exercise_id: str) -> Optional[SessionExercise]:
        for exercise in self.exercises:
            if exercise.id == exercise_id:
                return exercise
        return None

    # -------------------------------------------------------------------------
    # Domain Methods (return new instances for immutability)
    # -------------------------------------------------------------------------

    def with_exercises(self, exercises: List[SessionExercise]) -> "SessionExerciseGroup":
        return self.model_copy(update={"exercises": list(exercises)})

    def with_exercise(self, updated: SessionExercise) -> "SessionExerciseGroup":
        """Return a new group with one member (matched by id) replaced."""
        return self.with_exercises(
            [updated if e.id == updated.id else e for e in self.exercises]
        )

    def with_current_round(self, current_round: int) -> "SessionExerciseGroup":
        return self.model_copy(update={"current_round": current_round})

    def __str__(self) -> str:
        kind = "Superset" if self.is_superset else "Circuit" if self.is_circuit else "Group"
        return f"{kind}(round {self.current_round}/{self.total_rounds}, {self.exercise_count} exercises)"
