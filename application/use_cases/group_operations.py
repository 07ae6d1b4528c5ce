"""
Superset/circuit group use cases.
"""

import logging
from typing import Optional

from application.use_cases.base import SessionUseCase
from domain.models import WorkoutSession
from domain.services import group_round_tracker

logger = logging.getLogger(__name__)


class CompleteGroupSetUseCase(SessionUseCase):
    """
    Toggle one group set, advancing the round once every member is done.

    Usage:
        >>> use_case = CompleteGroupSetUseCase(session_repo=repo)
        >>> session = await use_case.execute(session_id, group_id, exercise_id, set_id)
    """

    async def execute(
        self,
        session_id: str,
        group_id: str,
        exercise_id: str,
        set_id: str,
    ) -> WorkoutSession:
        """
        Raises:
            InvalidOperation: If the session has no exercise groups
            GroupNotFound: If the group is not in the session
            ExerciseNotFound: If the exercise is not a member of the group
            SetNotFound: If the set is not part of the member
        """
        now = self._clock()
        rounds = {}

        def operation(session: WorkoutSession) -> WorkoutSession:
            group = self._require_group(session, group_id)
            updated = group_round_tracker.complete_group_set(group, exercise_id, set_id, now)
            rounds["before"], rounds["after"] = group.current_round, updated.current_round
            return session.with_group(updated)

        session = await self._mutate(session_id, operation)
        if rounds["after"] != rounds["before"]:
            logger.info(f"Group {group_id} auto-advanced to round {rounds['after']}")
        return session


class AdvanceToNextRoundUseCase(SessionUseCase):
    """Manually move a group to its next round."""

    async def execute(self, session_id: str, group_id: str) -> WorkoutSession:
        """
        Raises:
            InvalidOperation: If the group is on its final round
        """

        def operation(session: WorkoutSession) -> WorkoutSession:
            group = self._require_group(session, group_id)
            return session.with_group(group_round_tracker.advance_to_next_round(group))

        return await self._mutate(session_id, operation)


class UpdateGroupSetUseCase(SessionUseCase):
    """Edit weight/reps of a group set. Zero weight (bodyweight) is accepted."""

    async def execute(
        self,
        session_id: str,
        group_id: str,
        exercise_id: str,
        set_id: str,
        weight: Optional[float] = None,
        reps: Optional[int] = None,
    ) -> WorkoutSession:
        def operation(session: WorkoutSession) -> WorkoutSession:
            group = self._require_group(session, group_id)
            return session.with_group(
                group_round_tracker.update_group_set(group, exercise_id, set_id, weight, reps)
            )

        return await self._mutate(session_id, operation)
