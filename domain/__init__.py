"""
Domain layer for the workout session engine.

This package contains the session aggregate, its invariant checks and the
pure services that mutate it. Nothing here performs I/O; the application
layer fetches and persists.
"""

from domain.models import (
    SessionExercise,
    SessionExerciseGroup,
    SessionSet,
    SessionState,
    WorkoutSession,
    WorkoutTemplate,
    WorkoutType,
)

__all__ = [
    "SessionExercise",
    "SessionExerciseGroup",
    "SessionSet",
    "SessionState",
    "WorkoutSession",
    "WorkoutTemplate",
    "WorkoutType",
]
