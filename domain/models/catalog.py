"""
Catalog exercise snapshot used for session defaults.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CatalogExercise(BaseModel):
    """
    Read-only view of an exercise catalog entry.

    Carries the last-used history that seeds weight/reps defaults when a
    session is started or an exercise is added mid-session.
    """

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    last_used_weight: Optional[float] = Field(default=None, ge=0)
    last_used_reps: Optional[int] = Field(default=None, ge=0)
    last_used_rest_time: Optional[float] = Field(default=None, ge=0)
    last_used_set_count: Optional[int] = Field(default=None, ge=1)
    last_used_at: Optional[datetime] = None

    model_config = {"frozen": True}

    def with_last_used(self, weight: float, reps: int, date: datetime) -> "CatalogExercise":
        """Return a new entry with the last-used history replaced."""
        return self.model_copy(
            update={"last_used_weight": weight, "last_used_reps": reps, "last_used_at": date}
        )
