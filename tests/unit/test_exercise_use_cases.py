"""
Unit tests for exercise-level and superset/circuit use cases.
"""

import pytest

from application.use_cases import (
    AddExerciseToSessionUseCase,
    AdvanceToNextRoundUseCase,
    CompleteGroupSetUseCase,
    FinishExerciseUseCase,
    ReorderExercisesUseCase,
    UpdateExerciseNotesUseCase,
    UpdateGroupSetUseCase,
)
from domain.exceptions import (
    ExerciseNotFound,
    GroupNotFound,
    InvalidInput,
    InvalidOperation,
)
from tests.fakes import make_group_session, make_session

pytestmark = pytest.mark.unit


@pytest.fixture
def seeded(session_repo):
    session = make_session()
    session_repo.seed([session])
    return session


@pytest.fixture
def grouped(session_repo):
    session = make_group_session(member_count=2, rounds=3)
    session_repo.seed([session])
    return session


# =============================================================================
# Finish / Reorder
# =============================================================================


class TestFinishExercise:
    """Tests for the exercise finished flag."""

    async def test_finish_and_reopen(self, session_repo, seeded):
        use_case = FinishExerciseUseCase(session_repo)

        finished = await use_case.execute("session-1", "ex-1")
        assert finished.find_exercise("ex-1").is_finished is True

        reopened = await use_case.execute("session-1", "ex-1", finished=False)
        assert reopened.find_exercise("ex-1").is_finished is False

    async def test_repeat_is_noop(self, session_repo, seeded):
        use_case = FinishExerciseUseCase(session_repo)
        await use_case.execute("session-1", "ex-1")
        await use_case.execute("session-1", "ex-1")
        assert len(session_repo.updates) == 1


class TestReorderExercises:
    """Tests for exercise reordering."""

    async def test_reassigns_order_indexes(self, session_repo, seeded):
        updated = await ReorderExercisesUseCase(session_repo).execute(
            "session-1", ["ex-2", "ex-1"]
        )
        assert [e.id for e in updated.sorted_exercises] == ["ex-2", "ex-1"]
        assert [e.order_index for e in updated.sorted_exercises] == [0, 1]

    @pytest.mark.parametrize(
        "ids",
        [["ex-1"], ["ex-1", "ex-1"], ["ex-1", "ex-2", "ex-3"], ["ex-1", "other"]],
    )
    async def test_rejects_non_permutation(self, session_repo, seeded, ids):
        with pytest.raises(InvalidInput):
            await ReorderExercisesUseCase(session_repo).execute("session-1", ids)
        assert session_repo.updates == []


# =============================================================================
# AddExerciseToSession
# =============================================================================


class TestAddExerciseToSession:
    """Tests for adding a catalog exercise mid-session."""

    async def test_appends_after_last_exercise(self, session_repo, catalog, seeded):
        updated = await AddExerciseToSessionUseCase(session_repo, catalog).execute(
            "session-1", "pull-up"
        )

        added = updated.sorted_exercises[-1]
        assert added.exercise_id == "pull-up"
        assert added.name == "Pull Up"
        assert added.order_index == 2
        assert added.set_count == 4
        assert [(s.weight, s.reps, s.rest_time) for s in added.sets] == [(0.0, 10, 120.0)] * 4

    async def test_defaults_without_history(self, session_repo, catalog, seeded):
        use_case = AddExerciseToSessionUseCase(
            session_repo, catalog, default_set_count=2, default_reps=12
        )
        updated = await use_case.execute("session-1", "barbell-back-squat")

        added = updated.sorted_exercises[-1]
        assert [(s.weight, s.reps) for s in added.sets] == [(0.0, 12), (0.0, 12)]
        assert added.has_gapless_set_order

    async def test_unknown_catalog_exercise(self, session_repo, catalog, seeded):
        with pytest.raises(ExerciseNotFound):
            await AddExerciseToSessionUseCase(session_repo, catalog).execute(
                "session-1", "missing"
            )
        assert session_repo.fetch_count == 0

    async def test_first_exercise_of_grouped_session(self, session_repo, catalog, grouped):
        updated = await AddExerciseToSessionUseCase(session_repo, catalog).execute(
            "group-session", "pull-up"
        )
        assert [e.order_index for e in updated.exercises] == [0]
        assert len(updated.exercise_groups[0].exercises) == 2


# =============================================================================
# Notes
# =============================================================================


class TestUpdateExerciseNotes:
    """Tests for exercise notes."""

    async def test_notes_are_trimmed(self, session_repo, seeded):
        updated = await UpdateExerciseNotesUseCase(session_repo).execute(
            "session-1", "ex-1", "  felt strong  "
        )
        assert updated.find_exercise("ex-1").notes == "felt strong"

    async def test_blank_notes_cleared(self, session_repo, seeded):
        use_case = UpdateExerciseNotesUseCase(session_repo)
        await use_case.execute("session-1", "ex-1", "grip")
        updated = await use_case.execute("session-1", "ex-1", "   ")
        assert updated.find_exercise("ex-1").notes is None

    async def test_too_long_rejected(self, session_repo, seeded):
        use_case = UpdateExerciseNotesUseCase(session_repo, max_notes_length=10)
        with pytest.raises(InvalidInput):
            await use_case.execute("session-1", "ex-1", "x" * 11)
        assert session_repo.fetch_count == 0

    async def test_group_member_notes(self, session_repo, grouped):
        updated = await UpdateExerciseNotesUseCase(session_repo).execute(
            "group-session", "member-1", "slow eccentric"
        )
        member = updated.exercise_groups[0].find_exercise("member-1")
        assert member.notes == "slow eccentric"

    async def test_unknown_exercise(self, session_repo, seeded):
        with pytest.raises(ExerciseNotFound):
            await UpdateExerciseNotesUseCase(session_repo).execute("session-1", "nope", "x")


# =============================================================================
# Groups
# =============================================================================


class TestGroupUseCases:
    """Tests for superset/circuit round handling through the repository."""

    async def test_round_auto_advances(self, session_repo, clock, grouped):
        use_case = CompleteGroupSetUseCase(session_repo, clock=clock)

        after_first = await use_case.execute(
            "group-session", "group-1", "member-0", "member-0-set-0"
        )
        assert after_first.exercise_groups[0].current_round == 1

        after_second = await use_case.execute(
            "group-session", "group-1", "member-1", "member-1-set-0"
        )
        assert after_second.exercise_groups[0].current_round == 2
        assert session_repo.get("group-session").exercise_groups[0].current_round == 2

    async def test_manual_advance_until_final_round(self, session_repo, grouped):
        use_case = AdvanceToNextRoundUseCase(session_repo)
        await use_case.execute("group-session", "group-1")
        final = await use_case.execute("group-session", "group-1")
        assert final.exercise_groups[0].current_round == 3

        with pytest.raises(InvalidOperation):
            await use_case.execute("group-session", "group-1")
        assert len(session_repo.updates) == 2

    async def test_update_group_set_bodyweight(self, session_repo, grouped):
        updated = await UpdateGroupSetUseCase(session_repo).execute(
            "group-session", "group-1", "member-0", "member-0-set-1", weight=0, reps=20
        )
        edited = updated.exercise_groups[0].find_exercise("member-0").find_set("member-0-set-1")
        assert (edited.weight, edited.reps) == (0, 20)

    async def test_unknown_group(self, session_repo, grouped):
        with pytest.raises(GroupNotFound):
            await AdvanceToNextRoundUseCase(session_repo).execute("group-session", "nope")

    async def test_standard_session_has_no_groups(self, session_repo, seeded):
        with pytest.raises(InvalidOperation):
            await AdvanceToNextRoundUseCase(session_repo).execute("session-1", "group-1")

    async def test_member_not_in_group(self, session_repo, grouped):
        with pytest.raises(ExerciseNotFound):
            await CompleteGroupSetUseCase(session_repo).execute(
                "group-session", "group-1", "ex-1", "set-0"
            )

    async def test_group_member_rejected_by_finish(
        self, session_repo, grouped
    ):
        with pytest.raises(InvalidOperation):
            await FinishExerciseUseCase(session_repo).execute("group-session", "member-0")

    async def test_grouped_session_still_holds_one_set_per_round(
        self, session_repo, clock, grouped
    ):
        use_case = CompleteGroupSetUseCase(session_repo, clock=clock)
        for member in ("member-0", "member-1"):
            await use_case.execute("group-session", "group-1", member, f"{member}-set-0")

        stored = session_repo.get("group-session")
        group = stored.exercise_groups[0]
        assert all(m.set_count == group.total_rounds for m in group.exercises)
