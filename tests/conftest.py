"""
Shared fixtures for session engine tests.
"""

import pytest

from application.services.health_sync import HealthSyncService
from tests.fakes import (
    FakeClock,
    FakeExerciseCatalog,
    FakeHealthExporter,
    FakeSessionRepository,
    FakeTemplateRepository,
    make_catalog_entries,
    make_grouped_template,
    make_template,
)


@pytest.fixture
def session_repo() -> FakeSessionRepository:
    """Create a fresh fake session repository."""
    return FakeSessionRepository()


@pytest.fixture
def catalog() -> FakeExerciseCatalog:
    """Catalog seeded with bench press (with history), squat and pull-up."""
    return FakeExerciseCatalog(make_catalog_entries())


@pytest.fixture
def template_repo() -> FakeTemplateRepository:
    return FakeTemplateRepository([make_template(), make_grouped_template()])


@pytest.fixture
def exporter() -> FakeHealthExporter:
    return FakeHealthExporter()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def health_sync(session_repo, exporter):
    """Health sync over the fake exporter; pending exports are drained on teardown."""
    service = HealthSyncService(session_repo, exporter)
    yield service
    exporter.start_gate.set()
    await service.drain()
