"""
SessionSet value object - one performed (or planned) set of an exercise.
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator


class SessionSet(BaseModel):
    """
    A single set within a session exercise.

    ``is_warmup`` is the only source of truth for whether a set is a warmup
    set. It is fixed when the set is created and no domain operation ever
    rewrites it; ``order_index`` only describes display order.

    Examples:
        >>> s = SessionSet(weight=100.0, reps=8, order_index=0)
        >>> s.completed
        False
        >>> s.toggled(now).completed
        True
    """

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Unique identifier (UUID string)",
    )
    weight: float = Field(
        default=0.0, ge=0, description="Weight, unit-agnostic (0 for bodyweight)"
    )
    reps: int = Field(default=0, ge=0, description="Repetitions")
    duration_seconds: Optional[float] = Field(
        default=None,
        ge=0,
        description="Duration for time-based exercises (reps are ignored)",
    )
    completed: bool = Field(default=False, description="Whether the set is done")
    completed_at: Optional[datetime] = Field(
        default=None, description="Completion timestamp, present iff completed"
    )
    rest_time: Optional[float] = Field(
        default=None, ge=0, description="Rest after this set in seconds"
    )
    order_index: int = Field(default=0, ge=0, description="0-based display order")
    is_warmup: bool = Field(default=False, description="Warmup flag, immutable")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_completion_timestamp(self) -> "SessionSet":
        """Ensure completed_at is present exactly when the set is completed."""
        if self.completed and self.completed_at is None:
            raise ValueError("Completed set must have completed_at")
        if not self.completed and self.completed_at is not None:
            raise ValueError("Incomplete set must not have completed_at")
        return self

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def is_working_set(self) -> bool:
        """Check if this is a working (non-warmup) set."""
        return not self.is_warmup

    @property
    def volume(self) -> float:
        """Weight x reps for this set."""
        return self.weight * self.reps

    # -------------------------------------------------------------------------
    # Domain Methods (return new instances for immutability)
    # -------------------------------------------------------------------------

    def toggled(self, now: datetime) -> "SessionSet":
        """
        Return a new set with completion flipped.

        Completing stamps ``completed_at`` with ``now``; uncompleting clears
        it. Applying this twice yields the original completion state.

        Args:
            now: Timestamp recorded when the set becomes completed.

        Returns:
            New SessionSet with completed/completed_at flipped.
        """
        if self.completed:
            return self.model_copy(update={"completed": False, "completed_at": None})
        return self.model_copy(update={"completed": True, "completed_at": now})

    def with_order_index(self, order_index: int) -> "SessionSet":
        """Return a new set at the given display position."""
        return self.model_copy(update={"order_index": order_index})

    def with_values(
        self,
        weight: Optional[float] = None,
        reps: Optional[int] = None,
    ) -> "SessionSet":
        """Return a new set with weight and/or reps replaced."""
        update = {}
        if weight is not None:
            update["weight"] = float(weight)
        if reps is not None:
            update["reps"] = reps
        return self.model_copy(update=update) if update else self

    def with_rest_time(self, rest_time: Optional[float]) -> "SessionSet":
        """Return a new set with a different rest time."""
        return self.model_copy(update={"rest_time": rest_time})

    def __str__(self) -> str:
        kind = "warmup" if self.is_warmup else "working"
        done = "x" if self.completed else " "
        return f"[{done}] #{self.order_index} {self.weight:g} x {self.reps} ({kind})"
