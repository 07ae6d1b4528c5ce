"""
Round tracking for superset and circuit groups.

Each group member holds one set per round; the set for round ``r`` is the
one with ``order_index == r - 1``. A round can be advanced once every
member has completed its set for that round. Completing the last member's
set advances automatically unless the group is already on its final round.
"""

import logging
from datetime import datetime
from typing import Optional

from domain.clock import utc_now
from domain.exceptions import ExerciseNotFound, InvalidOperation
from domain.models.exercise_group import SessionExerciseGroup
from domain.models.session_exercise import SessionExercise
from domain.services import set_ordering_policy

logger = logging.getLogger(__name__)


def _require_member(group: SessionExerciseGroup, exercise_id: str) -> SessionExercise:
    exercise = group.find_exercise(exercise_id)
    if exercise is None:
        raise ExerciseNotFound(exercise_id)
    return exercise


def can_advance(group: SessionExerciseGroup) -> bool:
    """Check if every member completed its set for the current round."""
    return group.is_round_complete(group.current_round)


def advance_to_next_round(group: SessionExerciseGroup) -> SessionExerciseGroup:
    """
    Move the group to its next round.

    Manual advance does not require the current round to be complete.

    Raises:
        InvalidOperation: If the group is already on its final round.
    """
    if group.current_round >= group.total_rounds:
        raise InvalidOperation(
            f"Group is already on its final round ({group.current_round}/{group.total_rounds})"
        )
    logger.info(
        f"Group {group.id} advancing to round {group.current_round + 1}/{group.total_rounds}"
    )
    return group.with_current_round(group.current_round + 1)


def refresh_finished_flags(group: SessionExerciseGroup) -> SessionExerciseGroup:
    """Set every member's ``is_finished`` to whether all its sets are completed."""
    return group.with_exercises(
        [
            e if e.is_finished == e.all_sets_completed else e.with_finished(e.all_sets_completed)
            for e in group.exercises
        ]
    )


def complete_group_set(
    group: SessionExerciseGroup,
    exercise_id: str,
    set_id: str,
    now: Optional[datetime] = None,
) -> SessionExerciseGroup:
    """
    Toggle one member set and auto-advance when the round is complete.

    Completion follows the same toggle semantics as ungrouped sets, so
    calling this on a completed set uncompletes it. ``is_finished`` is
    recomputed for every member afterwards, which means uncompleting a set
    clears the flag again.

    Args:
        group: Group containing the member.
        exercise_id: Session exercise id of the member.
        set_id: Set to toggle.
        now: Completion timestamp (defaults to current UTC time).

    Returns:
        New group with the set toggled, possibly advanced.

    Raises:
        ExerciseNotFound: If the exercise is not a member of the group.
        SetNotFound: If the set is not part of the member.
    """
    member = _require_member(group, exercise_id)
    updated_member = set_ordering_policy.toggle_completion(member, set_id, now or utc_now())
    updated = group.with_exercise(updated_member)

    if can_advance(updated) and not updated.is_final_round:
        updated = advance_to_next_round(updated)

    return refresh_finished_flags(updated)


def update_group_set(
    group: SessionExerciseGroup,
    exercise_id: str,
    set_id: str,
    weight: Optional[float] = None,
    reps: Optional[int] = None,
) -> SessionExerciseGroup:
    """
    Edit weight/reps of one member set. Zero weight (bodyweight) is allowed.

    Raises:
        ExerciseNotFound: If the exercise is not a member of the group.
        SetNotFound: If the set is not part of the member.
        InvalidInput: For negative weight or non-positive reps.
    """
    member = _require_member(group, exercise_id)
    updated_member = set_ordering_policy.update_set(
        member, set_id, weight=weight, reps=reps, allow_zero_weight=True
    )
    return group.with_exercise(updated_member)
