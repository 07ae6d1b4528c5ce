"""
SessionExercise entity - an exercise being performed in a session.
"""

from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from domain.models.session_set import SessionSet

MAX_NOTES_LENGTH = 500


class SessionExercise(BaseModel):
    """
    An exercise within a workout session, owning its ordered sets.

    ``order_index`` is used for display ordering among sibling exercises
    only. It never encodes exercise type or grouping.

    Examples:
        >>> exercise = SessionExercise(
        ...     exercise_id="barbell-back-squat",
        ...     name="Back Squat",
        ...     sets=[
        ...         SessionSet(weight=100, reps=5, order_index=0),
        ...         SessionSet(weight=100, reps=5, order_index=1),
        ...     ],
        ... )
        >>> exercise.has_gapless_set_order
        True
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    exercise_id: str = Field(..., min_length=1, description="Catalog exercise id")
    name: str = Field(..., min_length=1, description="Display name snapshot")
    sets: List[SessionSet] = Field(default_factory=list)
    notes: Optional[str] = Field(default=None, max_length=MAX_NOTES_LENGTH)
    rest_time_to_next: Optional[float] = Field(
        default=None, ge=0, description="Rest before the next exercise (seconds)"
    )
    is_finished: bool = Field(default=False)
    order_index: int = Field(default=0, ge=0, description="Display order only")

    model_config = {"frozen": True}

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def sorted_sets(self) -> List[SessionSet]:
        """Sets in display order."""
        return sorted(self.sets, key=lambda s: s.order_index)

    @property
    def warmup_sets(self) -> List[SessionSet]:
        """Warmup sets in display order."""
        return [s for s in self.sorted_sets if s.is_warmup]

    @property
    def working_sets(self) -> List[SessionSet]:
        """Working sets in display order."""
        return [s for s in self.sorted_sets if not s.is_warmup]

    @property
    def has_warmup_sets(self) -> bool:
        return any(s.is_warmup for s in self.sets)

    @property
    def set_count(self) -> int:
        return len(self.sets)

    @property
    def completed_set_count(self) -> int:
        return sum(1 for s in self.sets if s.completed)

    @property
    def all_sets_completed(self) -> bool:
        """True when every set is completed (False for an exercise without sets)."""
        return bool(self.sets) and all(s.completed for s in self.sets)

    @property
    def set_order_indexes(self) -> List[int]:
        """Current set order indexes, sorted."""
        return sorted(s.order_index for s in self.sets)

    @property
    def has_gapless_set_order(self) -> bool:
        """Check that set order indexes are exactly 0..n-1."""
        return self.set_order_indexes == list(range(len(self.sets)))

    @property
    def next_set_order_index(self) -> int:
        """Order index for a set appended after all existing sets."""
        return max((s.order_index for s in self.sets), default=-1) + 1

    @property
    def last_set(self) -> Optional[SessionSet]:
        """The set with the highest order index, if any."""
        ordered = self.sorted_sets
        return ordered[-1] if ordered else None

    @property
    def completed_volume(self) -> float:
        """Volume of completed working sets."""
        return sum(s.volume for s in self.sets if s.completed and not s.is_warmup)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def find_set(self, set_id: str) -> Optional[SessionSet]:
        for s in self.sets:
            if s.id == set_id:
                return s
        return None

    def set_at(self, order_index: int) -> Optional[SessionSet]:
        """Return the set at a display position, if present."""
        for s in self.sets:
            if s.order_index == order_index:
                return s
        return None

    # -------------------------------------------------------------------------
    # Domain Methods (return new instances for immutability)
    # -------------------------------------------------------------------------

    def with_sets(self, sets: List[SessionSet]) -> "SessionExercise":
        """Return a new exercise with the set list replaced."""
        return self.model_copy(update={"sets": list(sets)})

    def with_set(self, updated: SessionSet) -> "SessionExercise":
        """Return a new exercise with one set (matched by id) replaced."""
        return self.with_sets([updated if s.id == updated.id else s for s in self.sets])

    def with_finished(self, is_finished: bool) -> "SessionExercise":
        return self.model_copy(update={"is_finished": is_finished})

    def with_notes(self, notes: Optional[str]) -> "SessionExercise":
        return self.model_copy(update={"notes": notes})

    def with_order_index(self, order_index: int) -> "SessionExercise":
        return self.model_copy(update={"order_index": order_index})

    def __str__(self) -> str:
        return (
            f"SessionExercise({self.name!r}, "
            f"{self.completed_set_count}/{self.set_count} sets)"
        )
