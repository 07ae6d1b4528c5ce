"""
Repository and Collaborator Interfaces (Ports) for the session engine.

This package defines abstract interfaces that decouple the use cases from
infrastructure (database, exercise catalog, health store). Implementations
are provided in the infrastructure layer.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the use cases need)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import SessionRepository, ExerciseCatalog

    class SomeUseCase:
        def __init__(self, session_repo: SessionRepository):
            self._session_repo = session_repo

        async def execute(self, session_id: str):
            return await self._session_repo.fetch(session_id)
"""

# Session persistence
from application.ports.session_repository import SessionRepository

# Exercise catalog
from application.ports.exercise_catalog import ExerciseCatalog

# Health-data export
from application.ports.health_exporter import HealthExporter

# Templates
from application.ports.template_repository import WorkoutTemplateRepository

__all__ = [
    "SessionRepository",
    "ExerciseCatalog",
    "HealthExporter",
    "WorkoutTemplateRepository",
]
