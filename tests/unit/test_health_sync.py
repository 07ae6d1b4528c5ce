"""
Unit tests for background health-data export.

Tests for:
- Energy estimate and export metadata
- Attaching the correlation id without overwriting newer session writes
- Sessions cancelled or ended before the exporter answers
- Exporter failures staying in the logs
"""

import logging

import pytest

from application.services.health_sync import (
    HealthSyncService,
    build_metadata,
    estimate_energy,
)
from application.use_cases import (
    AddSetUseCase,
    CancelSessionUseCase,
    EndSessionUseCase,
    StartSessionUseCase,
    ToggleSetCompletionUseCase,
)
from tests.fakes import FIXED_NOW, make_group_session, make_session

pytestmark = pytest.mark.unit


@pytest.fixture
def start_use_case(session_repo, template_repo, catalog, health_sync, clock):
    return StartSessionUseCase(session_repo, template_repo, catalog, health_sync, clock=clock)


class TestEnergyEstimate:
    """Tests for the MET-based energy estimate."""

    def test_one_hour_defaults(self):
        assert estimate_energy(3600) == pytest.approx(480.0)

    def test_custom_met_and_weight(self):
        assert estimate_energy(1800, met=3.5, body_weight_kg=70) == pytest.approx(122.5)

    def test_zero_duration(self):
        assert estimate_energy(0) == 0


class TestMetadata:
    """Tests for export metadata."""

    def test_counts_group_members(self):
        metadata = build_metadata(make_group_session(member_count=3))
        assert metadata["exerciseCount"] == 3
        assert metadata["workoutName"] == "Arms Superset"

    async def test_volume_of_completed_working_sets(self, session_repo, clock):
        session_repo.seed([make_session()])
        toggle = ToggleSetCompletionUseCase(session_repo, clock=clock)
        session = await toggle.execute("session-1", "ex-1", "set-0")
        assert build_metadata(session)["totalVolume"] == 800.0

    def test_unnamed_workout(self):
        session = make_session().model_copy(update={"template_name": None})
        assert build_metadata(session)["workoutName"] == "Workout"


class TestStartExport:
    """Tests for the background start task."""

    async def test_attach_keeps_concurrent_edits(
        self, start_use_case, session_repo, catalog, exporter, health_sync
    ):
        exporter.start_gate.clear()
        session = await start_use_case.execute("tpl-1")
        bench = session.sorted_exercises[0]

        await AddSetUseCase(session_repo, catalog).execute(session.id, bench.id, 105, 5)
        assert health_sync.pending_count == 1

        exporter.start_gate.set()
        await health_sync.drain()

        stored = session_repo.get(session.id)
        assert stored.health_session_id == "health-1"
        assert stored.find_exercise(bench.id).set_count == 4
        assert health_sync.pending_count == 0

    async def test_cancelled_before_exporter_answers(
        self, start_use_case, session_repo, exporter, health_sync
    ):
        exporter.start_gate.clear()
        session = await start_use_case.execute("tpl-1")
        await CancelSessionUseCase(session_repo, health_sync).execute(session.id)

        exporter.start_gate.set()
        await health_sync.drain()

        assert exporter.cancelled == ["health-1"]
        assert session_repo.get(session.id) is None

    async def test_ended_before_exporter_answers(
        self, start_use_case, session_repo, exporter, health_sync, clock
    ):
        exporter.start_gate.clear()
        session = await start_use_case.execute("tpl-1")
        await EndSessionUseCase(session_repo, health_sync, clock=clock).execute(session.id)
        assert exporter.ended == []

        exporter.start_gate.set()
        await health_sync.drain()

        assert len(exporter.ended) == 1
        assert exporter.ended[0]["correlation_id"] == "health-1"
        assert session_repo.get(session.id).health_session_id == "health-1"

    async def test_start_failure_is_logged(
        self, start_use_case, session_repo, exporter, health_sync, caplog
    ):
        exporter.fail_start = True

        with caplog.at_level(logging.WARNING):
            session = await start_use_case.execute("tpl-1")
            await health_sync.drain()

        assert session_repo.get(session.id).health_session_id is None
        assert "Failed to start health session" in caplog.text

    async def test_attach_failure_is_logged(
        self, start_use_case, session_repo, exporter, health_sync, caplog
    ):
        exporter.start_gate.clear()
        session = await start_use_case.execute("tpl-1")
        session_repo.fail_on.add("update")

        with caplog.at_level(logging.WARNING):
            exporter.start_gate.set()
            await health_sync.drain()

        assert "Failed to attach health session" in caplog.text
        assert session_repo.get(session.id) == session


class TestEndExport:
    """Tests for the background end task."""

    async def test_end_failure_is_logged(self, session_repo, exporter, health_sync, caplog):
        exporter.fail_end = True
        session_repo.seed([make_session().with_health_session_id("health-1")])

        with caplog.at_level(logging.WARNING):
            ended = await EndSessionUseCase(session_repo, health_sync).execute("session-1")
            await health_sync.drain()

        assert ended.end_date is not None
        assert "Failed to export session" in caplog.text

    async def test_disabled_service_schedules_nothing(self, session_repo, exporter):
        service = HealthSyncService(session_repo, exporter, enabled=False)
        session = make_session().with_health_session_id("health-1")

        assert service.schedule_start(session) is None
        assert service.schedule_end(session) is None
        await service.cancel(session)
        assert exporter.cancelled == []

    async def test_activity_type_passed_to_exporter(self, session_repo, exporter):
        service = HealthSyncService(session_repo, exporter, activity_type="functional_training")
        session = make_session()
        session_repo.seed([session])

        service.schedule_start(session)
        await service.drain()

        assert exporter.started == [("functional_training", FIXED_NOW)]
