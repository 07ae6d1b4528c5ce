"""
In-memory adapters for every port.

Usage:
    from infrastructure.memory import (
        InMemorySessionRepository,
        InMemoryExerciseCatalog,
        InMemoryWorkoutTemplateRepository,
        LoggingHealthExporter,
    )
"""

from infrastructure.memory.catalog import (
    InMemoryExerciseCatalog,
    InMemoryWorkoutTemplateRepository,
)
from infrastructure.memory.health_exporter import LoggingHealthExporter
from infrastructure.memory.session_repository import InMemorySessionRepository

__all__ = [
    "InMemorySessionRepository",
    "InMemoryExerciseCatalog",
    "InMemoryWorkoutTemplateRepository",
    "LoggingHealthExporter",
]
