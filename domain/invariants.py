"""
Aggregate invariant checks.

``collect_violations`` inspects a whole session and reports every broken
invariant as a readable message. ``ensure_valid`` is called by the use
cases right before persisting, so a broken aggregate is never written.
"""

from typing import List

from domain.exceptions import InvalidOperation
from domain.models.exercise_group import SessionExerciseGroup
from domain.models.session_exercise import SessionExercise
from domain.models.workout_session import WorkoutSession


def set_order_violations(exercise: SessionExercise) -> List[str]:
    """Set order indexes of one exercise must be exactly 0..n-1."""
    if exercise.has_gapless_set_order:
        return []
    return [
        f"Exercise {exercise.name!r} ({exercise.id}) has set order "
        f"{exercise.set_order_indexes}, expected {list(range(exercise.set_count))}"
    ]


def completion_violations(exercise: SessionExercise) -> List[str]:
    """completed_at must be present exactly when a set is completed."""
    errors = []
    for s in exercise.sets:
        if s.completed != (s.completed_at is not None):
            errors.append(
                f"Set {s.id} of {exercise.name!r} has completed={s.completed} "
                f"but completed_at={s.completed_at}"
            )
    return errors


def group_violations(group: SessionExerciseGroup) -> List[str]:
    """Round range and one-set-per-round shape of a superset/circuit."""
    errors = []
    if not 1 <= group.current_round <= group.total_rounds:
        errors.append(
            f"Group {group.id} current_round {group.current_round} outside "
            f"1..{group.total_rounds}"
        )
    for exercise in group.exercises:
        if exercise.set_count != group.total_rounds:
            errors.append(
                f"Group member {exercise.name!r} has {exercise.set_count} sets, "
                f"expected {group.total_rounds}"
            )
    return errors


def collect_violations(session: WorkoutSession) -> List[str]:
    """
    Check every aggregate invariant of a session.

    Args:
        session: The aggregate to inspect.

    Returns:
        List of violation messages (empty when the session is consistent).
    """
    errors: List[str] = []

    for order_index, count in session.exercise_order_conflicts():
        errors.append(f"{count} exercises share order_index {order_index}")

    for exercise in session.all_exercises:
        errors.extend(set_order_violations(exercise))
        errors.extend(completion_violations(exercise))

    for group in session.exercise_groups or []:
        errors.extend(group_violations(group))

    ids = [e.id for e in session.all_exercises]
    if len(ids) != len(set(ids)):
        errors.append("Duplicate session exercise ids")

    return errors


def ensure_valid(session: WorkoutSession) -> WorkoutSession:
    """
    Raise InvalidOperation if the session breaks any invariant.

    Returns:
        The same session, for call chaining.
    """
    errors = collect_violations(session)
    if errors:
        raise InvalidOperation(
            f"Session {session.id} violates {len(errors)} invariant(s)", errors=errors
        )
    return session
