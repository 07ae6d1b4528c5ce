"""
Unit tests for engine wiring.

Runs a full workout through ``build_in_memory_engine`` and checks that
settings flow into the use cases.
"""

from unittest.mock import AsyncMock, patch

import pytest

from domain.exceptions import ActiveSessionExists
from domain.models import SessionState
from infrastructure.db import SupabaseSessionRepository
from session_engine.container import build_in_memory_engine, build_supabase_engine
from session_engine.settings import Settings
from tests.fakes import (
    FakeClock,
    FakeExerciseCatalog,
    FakeTemplateRepository,
    make_catalog_entries,
    make_grouped_template,
    make_template,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def settings(monkeypatch) -> Settings:
    for var in ("ENVIRONMENT", "SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_ANON_KEY"):
        monkeypatch.delenv(var, raising=False)
    return Settings(_env_file=None, environment="test")


@pytest.fixture
async def engine(settings):
    engine = build_in_memory_engine(
        templates=[make_template(), make_grouped_template()],
        catalog=make_catalog_entries(),
        settings=settings,
        clock=FakeClock(),
    )
    yield engine
    await engine.shutdown()


class TestInMemoryEngine:
    """End-to-end flows over the in-memory adapters."""

    async def test_standard_workout(self, engine):
        session = await engine.start_session.execute("tpl-1")
        bench = session.sorted_exercises[0]

        session = await engine.add_warmup_sets.execute(session.id, bench.id)
        bench = session.find_exercise(bench.id)
        for s in bench.working_sets:
            session = await engine.toggle_set_completion.execute(session.id, bench.id, s.id)
        session = await engine.finish_exercise.execute(session.id, bench.id)

        ended = await engine.end_session.execute(session.id)
        await engine.shutdown()

        assert ended.state == SessionState.COMPLETED
        assert ended.total_volume == 100.0 * 8 * 3
        assert await engine.get_active_session.execute() is None
        assert (await engine.session_repo.fetch(session.id)).health_session_id is not None

    async def test_history_reaches_catalog(self, engine):
        session = await engine.start_session.execute("tpl-1")
        squat = session.sorted_exercises[1]

        await engine.add_set.execute(session.id, squat.id, weight=145, reps=3)

        entry = await engine.catalog.fetch("barbell-back-squat")
        assert (entry.last_used_weight, entry.last_used_reps) == (145, 3)

    async def test_single_open_session(self, engine):
        first = await engine.start_session.execute("tpl-1")
        await engine.pause_session.execute(first.id)

        with pytest.raises(ActiveSessionExists):
            await engine.start_session.execute("tpl-superset")

        await engine.cancel_session.execute(first.id)
        second = await engine.start_session.execute("tpl-superset")
        assert second.is_grouped

    async def test_superset_rounds(self, engine):
        session = await engine.start_session.execute("tpl-superset")
        group = session.exercise_groups[0]
        for member in group.exercises:
            session = await engine.complete_group_set.execute(
                session.id, group.id, member.id, member.sets[0].id
            )
        assert session.exercise_groups[0].current_round == 2


class TestSettingsWiring:
    """Settings values reach the use cases."""

    def test_health_settings(self, settings):
        settings = settings.model_copy(
            update={"health_export_enabled": False, "health_export_met": 5.0}
        )
        engine = build_in_memory_engine(settings=settings)
        assert engine.health_sync.enabled is False
        assert engine.health_sync.met == 5.0

    async def test_default_warmup_strategy(self, settings):
        settings = settings.model_copy(update={"default_warmup_strategy": "minimal"})
        engine = build_in_memory_engine([make_template()], make_catalog_entries(), settings)

        session = await engine.start_session.execute("tpl-1")
        session = await engine.add_warmup_sets_to_all.execute(session.id)
        await engine.shutdown()

        assert [len(e.warmup_sets) for e in session.sorted_exercises] == [2, 2]

    def test_warmup_calculator_uses_settings(self, settings):
        settings = settings.model_copy(update={"warmup_increment": 5.0})
        engine = build_in_memory_engine(settings=settings)
        weights = [s.weight for s in engine.warmup_calculator.calculate(100, 8, "standard")]
        assert weights == [40.0, 60.0, 80.0]
        assert engine.warmup_calculator.round_weight(42.4) == 40.0


class TestSupabaseEngine:
    """Wiring of the Supabase-backed engine."""

    async def test_requires_configuration(self, settings):
        with pytest.raises(ValueError, match="Supabase is not configured"):
            await build_supabase_engine(FakeTemplateRepository(), FakeExerciseCatalog(), settings=settings)

    async def test_builds_with_client(self, settings):
        settings = settings.model_copy(
            update={
                "supabase_url": "https://example.supabase.co",
                "supabase_service_role_key": "service-key",
                "sessions_table": "sessions",
            }
        )
        client = object()
        with patch(
            "infrastructure.db.client.acreate_client", new=AsyncMock(return_value=client)
        ) as create:
            engine = await build_supabase_engine(
                FakeTemplateRepository(), FakeExerciseCatalog(), settings=settings
            )

        create.assert_awaited_once_with("https://example.supabase.co", "service-key")
        assert isinstance(engine.session_repo, SupabaseSessionRepository)
        assert engine.session_repo._client is client
        assert engine.session_repo._table == "sessions"
