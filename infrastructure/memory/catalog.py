"""
In-memory implementations of ExerciseCatalog and WorkoutTemplateRepository.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, Optional

from domain.models import CatalogExercise, WorkoutTemplate

logger = logging.getLogger(__name__)


class InMemoryExerciseCatalog:
    """Exercise catalog held in a dict keyed by catalog id."""

    def __init__(self, entries: Iterable[CatalogExercise] = ()) -> None:
        self._entries: Dict[str, CatalogExercise] = {e.id: e for e in entries}

    def add(self, entry: CatalogExercise) -> None:
        self._entries[entry.id] = entry

    async def fetch(self, exercise_id: str) -> Optional[CatalogExercise]:
        return self._entries.get(exercise_id)

    async def update_last_used(
        self,
        exercise_id: str,
        weight: float,
        reps: int,
        date: datetime,
    ) -> None:
        entry = self._entries.get(exercise_id)
        if entry is None:
            logger.debug(f"No catalog entry {exercise_id}, skipping history update")
            return
        self._entries[exercise_id] = entry.with_last_used(weight, reps, date)


class InMemoryWorkoutTemplateRepository:
    """Read-only template store."""

    def __init__(self, templates: Iterable[WorkoutTemplate] = ()) -> None:
        self._templates: Dict[str, WorkoutTemplate] = {t.id: t for t in templates}

    def add(self, template: WorkoutTemplate) -> None:
        self._templates[template.id] = template

    async def fetch(self, template_id: str) -> Optional[WorkoutTemplate]:
        return self._templates.get(template_id)
