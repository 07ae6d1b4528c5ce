"""
Session lifecycle: creation from a template and state transitions.

    start ──> ACTIVE <──resume── PAUSED
                 │ ──pause──────>  │
                 └──end──> COMPLETED <──end──┘

Cancel deletes the session instead of transitioning it, so only the guard
lives here. None of these functions perform I/O; the caller prefetches the
catalog entries a template references.
"""

import logging
from datetime import datetime
from typing import List, Mapping, Optional

from domain.clock import utc_now
from domain.exceptions import InvalidOperation
from domain.models.catalog import CatalogExercise
from domain.models.exercise_group import SessionExerciseGroup
from domain.models.session_exercise import SessionExercise
from domain.models.session_set import SessionSet
from domain.models.template import TemplateExercise, WorkoutTemplate
from domain.models.workout_session import SessionState, WorkoutSession

logger = logging.getLogger(__name__)

UNKNOWN_EXERCISE_NAME = "Unknown Exercise"


# =============================================================================
# Start
# =============================================================================


def _default_weight(item: TemplateExercise, catalog: Optional[CatalogExercise]) -> float:
    if catalog is not None and catalog.last_used_weight is not None:
        return catalog.last_used_weight
    if item.target_weight is not None:
        return item.target_weight
    return 0.0


def _default_reps(item: TemplateExercise, catalog: Optional[CatalogExercise]) -> int:
    if catalog is not None and catalog.last_used_reps is not None:
        return catalog.last_used_reps
    if item.target_reps is not None:
        return item.target_reps
    return 0


def _build_exercise(
    item: TemplateExercise,
    catalog: Optional[CatalogExercise],
    set_count: int,
    default_rest_time: float,
    order_index: int,
) -> SessionExercise:
    weight = _default_weight(item, catalog)
    reps = _default_reps(item, catalog)
    fallback_rest = item.rest_time if item.rest_time is not None else default_rest_time

    sets = []
    for i in range(set_count):
        rest = item.rest_time_for_set(i)
        sets.append(
            SessionSet(
                weight=weight,
                reps=reps,
                duration_seconds=item.target_time,
                rest_time=rest if rest is not None else fallback_rest,
                order_index=i,
            )
        )

    return SessionExercise(
        exercise_id=item.exercise_id,
        name=catalog.name if catalog is not None else UNKNOWN_EXERCISE_NAME,
        sets=sets,
        notes=item.notes,
        rest_time_to_next=fallback_rest,
        order_index=order_index,
    )


def start(
    template: WorkoutTemplate,
    catalog_entries: Mapping[str, CatalogExercise],
    now: Optional[datetime] = None,
) -> WorkoutSession:
    """
    Build a new active session from a template.

    Weight and reps of every set default to the catalog's last-used values,
    then the template targets, then zero. Exercises are numbered by their
    position in the template, so template indexes only decide the order and
    ties keep list order. Superset/circuit templates produce
    one set per round for every group member.

    Args:
        template: Template to snapshot.
        catalog_entries: Catalog entries keyed by catalog exercise id. Missing
            entries fall back to template targets and a placeholder name.
        now: Session start time (defaults to current UTC time).

    Returns:
        New WorkoutSession in state ACTIVE.
    """
    exercises: List[SessionExercise] = [
        _build_exercise(
            item,
            catalog_entries.get(item.exercise_id),
            item.target_sets,
            template.default_rest_time,
            position,
        )
        for position, item in enumerate(sorted(template.exercises, key=lambda e: e.order_index))
    ]

    groups = None
    if template.workout_type.is_grouped:
        groups = []
        for template_group in sorted(template.exercise_groups or [], key=lambda g: g.group_index):
            members = [
                _build_exercise(
                    item,
                    catalog_entries.get(item.exercise_id),
                    template_group.rounds,
                    template.default_rest_time,
                    position,
                )
                for position, item in enumerate(
                    sorted(template_group.exercises, key=lambda e: e.order_index)
                )
            ]
            groups.append(
                SessionExerciseGroup(
                    exercises=members,
                    group_index=template_group.group_index,
                    current_round=1,
                    total_rounds=template_group.rounds,
                    rest_after_group=template_group.rest_after_group,
                )
            )

    session = WorkoutSession(
        template_id=template.id,
        template_name=template.name,
        workout_type=template.workout_type,
        start_date=now or utc_now(),
        state=SessionState.ACTIVE,
        exercises=exercises,
        exercise_groups=groups,
    )
    logger.info(
        f"Built session {session.id} from template {template.name!r} "
        f"({template.workout_type.value}, {session.total_set_count} sets)"
    )
    return session


# =============================================================================
# Transitions
# =============================================================================


def ensure_mutable(session: WorkoutSession) -> None:
    """Reject edits to a completed session."""
    if not session.is_open:
        raise InvalidOperation(
            f"Session {session.id} is {session.state.value} and cannot be modified"
        )


def ensure_cancellable(session: WorkoutSession) -> None:
    """Only active or paused sessions can be cancelled."""
    if not session.is_open:
        raise InvalidOperation(
            f"Cannot cancel session {session.id} in state {session.state.value}"
        )


def end(session: WorkoutSession, now: Optional[datetime] = None) -> WorkoutSession:
    """
    Complete an active or paused session.

    Records the end date and moves the session to COMPLETED. Sets are left
    exactly as they are; incomplete sets stay incomplete.

    Raises:
        InvalidOperation: If the session is already completed.
    """
    if not session.is_open:
        raise InvalidOperation(
            f"Cannot end session {session.id} in state {session.state.value}"
        )
    return session.with_state(SessionState.COMPLETED, end_date=now or utc_now())


def pause(session: WorkoutSession) -> WorkoutSession:
    """Move an active session to PAUSED."""
    if session.state != SessionState.ACTIVE:
        raise InvalidOperation(
            f"Cannot pause session {session.id} in state {session.state.value}"
        )
    return session.with_state(SessionState.PAUSED)


def resume(session: WorkoutSession) -> WorkoutSession:
    """Move a paused session back to ACTIVE."""
    if session.state != SessionState.PAUSED:
        raise InvalidOperation(
            f"Cannot resume session {session.id} in state {session.state.value}"
        )
    return session.with_state(SessionState.ACTIVE)
