"""
Workout Template Repository Interface (Port).

Templates are read-only from the engine's point of view.
"""
from typing import Optional, Protocol

from domain.models import WorkoutTemplate


class WorkoutTemplateRepository(Protocol):
    """Abstract interface for loading workout templates."""

    async def fetch(self, template_id: str) -> Optional[WorkoutTemplate]:
        """
        Get a template by id.

        Args:
            template_id: Template UUID

        Returns:
            The template or None if not found
        """
        ...
