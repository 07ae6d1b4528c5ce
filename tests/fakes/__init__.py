"""
Fake Collaborators and Factories for Testing.

This package provides in-memory fake implementations of the application
ports for fast, isolated testing. No database or external dependencies
required.

Features:
- All fakes implement the same Protocol interfaces as real implementations
- Supports seeding with test data
- Supports reset() for test isolation
- Failure injection for persistence, catalog and health export
- Factory functions for common session shapes

Usage:
    from tests.fakes import FakeSessionRepository, make_session

    repo = FakeSessionRepository()
    repo.seed([make_session()])
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from domain.models import (
    CatalogExercise,
    SessionExercise,
    SessionExerciseGroup,
    SessionSet,
    TemplateExercise,
    TemplateExerciseGroup,
    WorkoutSession,
    WorkoutTemplate,
    WorkoutType,
)
from tests.fakes.collaborators import (
    FakeExerciseCatalog,
    FakeHealthExporter,
    FakeTemplateRepository,
)
from tests.fakes.session_repository import FakeSessionRepository

FIXED_NOW = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock advancing one minute per call."""

    def __init__(self, start: datetime = FIXED_NOW) -> None:
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + timedelta(minutes=1)
        return now


# =============================================================================
# Factory Functions
# =============================================================================


def make_sets(
    count: int = 3,
    weight: float = 100.0,
    reps: int = 8,
    *,
    rest_time: Optional[float] = 90.0,
    warmup_count: int = 0,
) -> List[SessionSet]:
    """Sets with order indexes 0..n-1; the first ``warmup_count`` are warmups."""
    return [
        SessionSet(
            id=f"set-{i}",
            weight=weight,
            reps=reps,
            rest_time=rest_time,
            order_index=i,
            is_warmup=i < warmup_count,
        )
        for i in range(count)
    ]


def make_exercise(
    exercise_id: str = "ex-1",
    *,
    catalog_id: str = "barbell-bench-press",
    name: str = "Bench Press",
    sets: Optional[Sequence[SessionSet]] = None,
    order_index: int = 0,
) -> SessionExercise:
    return SessionExercise(
        id=exercise_id,
        exercise_id=catalog_id,
        name=name,
        sets=list(sets) if sets is not None else make_sets(),
        rest_time_to_next=90.0,
        order_index=order_index,
    )


def make_session(
    session_id: str = "session-1",
    *,
    exercises: Optional[Sequence[SessionExercise]] = None,
) -> WorkoutSession:
    """An active standard session (bench + squat by default)."""
    if exercises is None:
        exercises = [
            make_exercise("ex-1"),
            make_exercise(
                "ex-2",
                catalog_id="barbell-back-squat",
                name="Back Squat",
                sets=make_sets(3, weight=140.0, reps=5),
                order_index=1,
            ),
        ]
    return WorkoutSession(
        id=session_id,
        template_id="tpl-1",
        template_name="Push Day",
        start_date=FIXED_NOW,
        exercises=list(exercises),
    )


def make_group(
    group_id: str = "group-1",
    *,
    member_count: int = 2,
    rounds: int = 3,
    current_round: int = 1,
) -> SessionExerciseGroup:
    """A superset (2 members) or circuit (3+) with one set per round."""
    members = [
        SessionExercise(
            id=f"member-{m}",
            exercise_id=f"catalog-{m}",
            name=f"Station {m}",
            sets=[
                SessionSet(id=f"member-{m}-set-{r}", weight=20.0, reps=10, order_index=r)
                for r in range(rounds)
            ],
        )
        for m in range(member_count)
    ]
    return SessionExerciseGroup(
        id=group_id,
        exercises=members,
        total_rounds=rounds,
        current_round=current_round,
        rest_after_group=90.0,
    )


def make_group_session(
    session_id: str = "group-session",
    *,
    member_count: int = 2,
    rounds: int = 3,
) -> WorkoutSession:
    workout_type = WorkoutType.SUPERSET if member_count == 2 else WorkoutType.CIRCUIT
    return WorkoutSession(
        id=session_id,
        template_name="Arms Superset",
        workout_type=workout_type,
        start_date=FIXED_NOW,
        exercise_groups=[make_group(member_count=member_count, rounds=rounds)],
    )


def make_catalog_entries() -> List[CatalogExercise]:
    return [
        CatalogExercise(
            id="barbell-bench-press",
            name="Bench Press",
            last_used_weight=100.0,
            last_used_reps=8,
        ),
        CatalogExercise(id="barbell-back-squat", name="Back Squat"),
        CatalogExercise(
            id="pull-up",
            name="Pull Up",
            last_used_weight=0.0,
            last_used_reps=10,
            last_used_rest_time=120.0,
            last_used_set_count=4,
        ),
    ]


def make_template(template_id: str = "tpl-1") -> WorkoutTemplate:
    return WorkoutTemplate(
        id=template_id,
        name="Push Day",
        exercises=[
            TemplateExercise(
                exercise_id="barbell-bench-press",
                target_sets=3,
                target_reps=5,
                target_weight=60.0,
                rest_time=120.0,
                order_index=0,
            ),
            TemplateExercise(
                exercise_id="barbell-back-squat",
                target_sets=2,
                target_reps=5,
                target_weight=140.0,
                per_set_rest_times=[180.0, 150.0],
                order_index=1,
            ),
        ],
    )


def make_grouped_template(template_id: str = "tpl-superset") -> WorkoutTemplate:
    return WorkoutTemplate(
        id=template_id,
        name="Arms Superset",
        workout_type=WorkoutType.SUPERSET,
        exercise_groups=[
            TemplateExerciseGroup(
                exercises=[
                    TemplateExercise(exercise_id="barbell-curl", target_reps=12, order_index=0),
                    TemplateExercise(exercise_id="cable-pushdown", target_reps=12, order_index=1),
                ],
                rounds=4,
                rest_after_group=90.0,
            )
        ],
    )


__all__ = [
    # Fakes
    "FakeSessionRepository",
    "FakeExerciseCatalog",
    "FakeTemplateRepository",
    "FakeHealthExporter",
    "FakeClock",
    "FIXED_NOW",
    # Factories
    "make_sets",
    "make_exercise",
    "make_session",
    "make_group",
    "make_group_session",
    "make_catalog_entries",
    "make_template",
    "make_grouped_template",
]
