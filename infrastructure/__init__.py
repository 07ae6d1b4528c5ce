"""
Infrastructure Layer for the workout session engine.

This package contains concrete implementations of the application ports:
- db/: Supabase session repository
- memory/: In-memory adapters for every port
"""

from infrastructure.db import SupabaseSessionRepository
from infrastructure.memory import (
    InMemoryExerciseCatalog,
    InMemorySessionRepository,
    InMemoryWorkoutTemplateRepository,
    LoggingHealthExporter,
)

__all__ = [
    "SupabaseSessionRepository",
    "InMemorySessionRepository",
    "InMemoryExerciseCatalog",
    "InMemoryWorkoutTemplateRepository",
    "LoggingHealthExporter",
]
