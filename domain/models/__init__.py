"""
Domain models for the workout session engine.

This package contains pure domain models that are independent of
infrastructure concerns (database, health export, UI).

These models represent the core business concepts:
- WorkoutSession: The aggregate root for one training session
- SessionExercise: An exercise in the session owning ordered sets
- SessionSet: One set (weight/reps or duration, completion, warmup flag)
- SessionExerciseGroup: A superset/circuit tracked by rounds
- WorkoutTemplate: Read-only input a session is started from
- WarmupConfig / WarmupStrategy: Warmup calculator configuration

All models are frozen; domain methods return new instances.

Usage:
    >>> from domain.models import WorkoutSession, SessionExercise, SessionSet

    >>> session = WorkoutSession(
    ...     template_name="Push Day",
    ...     exercises=[
    ...         SessionExercise(
    ...             exercise_id="bench-press",
    ...             name="Bench Press",
    ...             sets=[SessionSet(weight=80, reps=8, order_index=0)],
    ...         )
    ...     ],
    ... )

    >>> # Serialize to JSON
    >>> json_str = session.model_dump_json(indent=2)

    >>> # Deserialize from JSON
    >>> session = WorkoutSession.model_validate_json(json_str)
"""

from domain.models.catalog import CatalogExercise
from domain.models.exercise_group import SessionExerciseGroup
from domain.models.session_exercise import MAX_NOTES_LENGTH, SessionExercise
from domain.models.session_set import SessionSet
from domain.models.template import (
    TemplateExercise,
    TemplateExerciseGroup,
    WorkoutTemplate,
    WorkoutType,
)
from domain.models.warmup import (
    DEFAULT_STRATEGIES,
    RepTier,
    WarmupConfig,
    WarmupStep,
    WarmupStrategy,
)
from domain.models.workout_session import SessionState, WorkoutSession

__all__ = [
    # Aggregate
    "WorkoutSession",
    "SessionExercise",
    "SessionSet",
    "SessionExerciseGroup",
    "MAX_NOTES_LENGTH",
    # Inputs
    "WorkoutTemplate",
    "TemplateExercise",
    "TemplateExerciseGroup",
    "CatalogExercise",
    # Warmup
    "WarmupConfig",
    "WarmupStrategy",
    "WarmupStep",
    "RepTier",
    "DEFAULT_STRATEGIES",
    # Enums
    "SessionState",
    "WorkoutType",
]
