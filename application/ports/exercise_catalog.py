"""
Exercise Catalog Interface (Port).

Read access to catalog entries plus the last-used history that seeds
weight/reps defaults for future sessions.
"""
from datetime import datetime
from typing import Optional, Protocol

from domain.models import CatalogExercise


class ExerciseCatalog(Protocol):
    """Abstract interface for the exercise catalog."""

    async def fetch(self, exercise_id: str) -> Optional[CatalogExercise]:
        """
        Get a catalog entry by id.

        Args:
            exercise_id: Catalog exercise id (e.g., "barbell-bench-press")

        Returns:
            Catalog entry or None if not found
        """
        ...

    async def update_last_used(
        self,
        exercise_id: str,
        weight: float,
        reps: int,
        date: datetime,
    ) -> None:
        """
        Record the most recent weight/reps used for an exercise.

        Callers treat this as best effort: failures are logged and never
        fail the operation that triggered them.
        """
        ...
