"""
Set ordering policy for a single exercise.

All set insertion and removal goes through this module. Every function is
pure: it takes a SessionExercise and returns a new one, leaving the input
untouched, and validates before building anything so a rejected call has
no effect.

Ordering rules:
- Set order indexes of an exercise are always exactly 0..n-1
- Appended sets go after the current maximum order index
- Removal sorts the remaining sets by their current order index and then
  renumbers them 0..n-1 (sort-then-renumber, never renumber by list position)
- Warmup batches go in front of all existing sets, shifting them up
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from domain.clock import utc_now
from domain.exceptions import InvalidInput, InvalidOperation, SetNotFound
from domain.models.session_exercise import SessionExercise
from domain.models.session_set import SessionSet
from domain.models.warmup import WarmupStep

logger = logging.getLogger(__name__)


# =============================================================================
# Validation helpers
# =============================================================================


def validate_weight(weight: float, *, allow_zero: bool = False) -> None:
    """Raise InvalidInput for a non-positive (or negative) weight."""
    if allow_zero:
        if weight < 0:
            raise InvalidInput(f"Weight cannot be negative: {weight}")
    elif weight <= 0:
        raise InvalidInput(f"Invalid weight: {weight}. Weight must be greater than 0.")


def validate_reps(reps: int) -> None:
    """Raise InvalidInput for a non-positive rep count."""
    if reps <= 0:
        raise InvalidInput(f"Invalid reps: {reps}. Reps must be greater than 0.")


def _require_set(exercise: SessionExercise, set_id: str) -> SessionSet:
    target = exercise.find_set(set_id)
    if target is None:
        raise SetNotFound(set_id)
    return target


# =============================================================================
# Ordering
# =============================================================================


def renumber_sets(sets: Sequence[SessionSet]) -> List[SessionSet]:
    """
    Sort sets by their current order index and reassign 0..n-1.

    Sorting is stable, so sets that share an index keep their list order.

    Args:
        sets: Sets in any order, possibly with gaps or duplicates.

    Returns:
        New list of sets with gapless order indexes.
    """
    ordered = sorted(sets, key=lambda s: s.order_index)
    return [
        s if s.order_index == i else s.with_order_index(i)
        for i, s in enumerate(ordered)
    ]


# =============================================================================
# Policy operations
# =============================================================================


def add_set(
    exercise: SessionExercise,
    weight: float,
    reps: int,
    *,
    is_warmup: bool = False,
) -> SessionExercise:
    """
    Append a new set after every existing set.

    The new set takes ``max(order_index) + 1`` and copies ``rest_time``
    from the current last set. Adding a set means the exercise is not done,
    so ``is_finished`` is cleared.

    Args:
        exercise: Exercise to extend.
        weight: Weight of the new set (> 0).
        reps: Reps of the new set (> 0).
        is_warmup: Warmup flag of the new set.

    Returns:
        New exercise containing the appended set.

    Raises:
        InvalidInput: If weight or reps is not positive.
    """
    validate_weight(weight)
    validate_reps(reps)

    last = exercise.last_set
    new_set = SessionSet(
        weight=float(weight),
        reps=reps,
        order_index=exercise.next_set_order_index,
        rest_time=last.rest_time if last is not None else exercise.rest_time_to_next,
        is_warmup=is_warmup,
    )
    logger.debug(
        f"Appending set #{new_set.order_index} to {exercise.name}: {weight:g} x {reps}"
    )
    return exercise.model_copy(
        update={"sets": [*exercise.sets, new_set], "is_finished": False}
    )


def remove_set(exercise: SessionExercise, set_id: str) -> SessionExercise:
    """
    Remove a set and close the gap it leaves.

    Args:
        exercise: Exercise to shrink.
        set_id: Id of the set to remove.

    Returns:
        New exercise with remaining sets renumbered 0..n-1.

    Raises:
        SetNotFound: If the set is not part of the exercise.
        InvalidOperation: If it is the last remaining set.
    """
    _require_set(exercise, set_id)
    if exercise.set_count <= 1:
        raise InvalidOperation(
            "Cannot remove the last set. Exercise must have at least one set."
        )

    remaining = [s for s in exercise.sets if s.id != set_id]
    return exercise.with_sets(renumber_sets(remaining))


def insert_warmup_batch(
    exercise: SessionExercise,
    warmup_steps: Sequence[WarmupStep],
) -> SessionExercise:
    """
    Put a batch of warmup sets in front of the existing sets.

    Idempotent: if the exercise already has any warmup set the call is a
    no-op and the exercise is returned unchanged. The whole batch is built
    from one view of the current sets, so it is all-or-nothing.

    Warmup sets get order indexes 0..k-1, every existing set is shifted up
    by k, and each warmup set copies ``rest_time`` from the first working
    set (left unset when there is none).

    Args:
        exercise: Exercise receiving warmups.
        warmup_steps: Calculated warmup weights/reps, lightest first.

    Returns:
        New exercise with warmups inserted, or the input exercise.
    """
    if exercise.has_warmup_sets or not warmup_steps:
        return exercise

    existing = renumber_sets(exercise.sets)
    working = [s for s in existing if not s.is_warmup]
    rest_time = working[0].rest_time if working else None

    k = len(warmup_steps)
    warmups = [
        SessionSet(
            weight=step.weight,
            reps=step.reps,
            order_index=i,
            rest_time=rest_time,
            is_warmup=True,
        )
        for i, step in enumerate(warmup_steps)
    ]
    shifted = [s.with_order_index(s.order_index + k) for s in existing]

    logger.debug(f"Inserting {k} warmup sets into {exercise.name}")
    return exercise.with_sets(warmups + shifted)


def toggle_completion(
    exercise: SessionExercise,
    set_id: str,
    now: Optional[datetime] = None,
) -> SessionExercise:
    """
    Flip ``completed`` on one set, stamping or clearing ``completed_at``.

    This is a toggle, not a "mark done": calling it twice restores the
    original completion state. Callers predicting the outcome must apply the
    same toggle.

    Raises:
        SetNotFound: If the set is not part of the exercise.
    """
    target = _require_set(exercise, set_id)
    return exercise.with_set(target.toggled(now or utc_now()))


def update_set(
    exercise: SessionExercise,
    set_id: str,
    weight: Optional[float] = None,
    reps: Optional[int] = None,
    *,
    allow_zero_weight: bool = False,
) -> SessionExercise:
    """
    Change weight and/or reps of one set. Ordering is untouched.

    Args:
        allow_zero_weight: Accept 0 (bodyweight) instead of requiring > 0.

    Raises:
        SetNotFound: If the set is not part of the exercise.
        InvalidInput: If a provided value is out of range.
    """
    target = _require_set(exercise, set_id)
    if weight is not None:
        validate_weight(weight, allow_zero=allow_zero_weight)
    if reps is not None:
        validate_reps(reps)
    return exercise.with_set(target.with_values(weight=weight, reps=reps))


def update_incomplete_sets(
    exercise: SessionExercise,
    weight: Optional[float] = None,
    reps: Optional[int] = None,
) -> SessionExercise:
    """
    Apply weight and/or reps to every set that is not completed yet.

    Completed sets record what was actually lifted and are left as they are.

    Raises:
        InvalidInput: If a provided value is not positive.
    """
    if weight is not None:
        validate_weight(weight)
    if reps is not None:
        validate_reps(reps)
    return exercise.with_sets(
        [s if s.completed else s.with_values(weight=weight, reps=reps) for s in exercise.sets]
    )
