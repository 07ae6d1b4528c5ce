"""
Tests for port protocol definitions.

These tests verify that:
1. Protocol definitions are valid and importable
2. Protocols define the expected methods
3. Every adapter and fake implements the methods of its port
"""
import inspect

import pytest

from application.ports import (
    ExerciseCatalog,
    HealthExporter,
    SessionRepository,
    WorkoutTemplateRepository,
)
from infrastructure import (
    InMemoryExerciseCatalog,
    InMemorySessionRepository,
    InMemoryWorkoutTemplateRepository,
    LoggingHealthExporter,
    SupabaseSessionRepository,
)
from tests.fakes import (
    FakeExerciseCatalog,
    FakeHealthExporter,
    FakeSessionRepository,
    FakeTemplateRepository,
)

# All tests in this module are pure logic tests - mark as unit
pytestmark = pytest.mark.unit


PORT_METHODS = {
    SessionRepository: ["fetch_active", "fetch", "save", "update", "delete"],
    ExerciseCatalog: ["fetch", "update_last_used"],
    HealthExporter: ["start_session", "end_session", "cancel_session"],
    WorkoutTemplateRepository: ["fetch"],
}

IMPLEMENTATIONS = [
    (SessionRepository, InMemorySessionRepository),
    (SessionRepository, SupabaseSessionRepository),
    (SessionRepository, FakeSessionRepository),
    (ExerciseCatalog, InMemoryExerciseCatalog),
    (ExerciseCatalog, FakeExerciseCatalog),
    (HealthExporter, LoggingHealthExporter),
    (HealthExporter, FakeHealthExporter),
    (WorkoutTemplateRepository, InMemoryWorkoutTemplateRepository),
    (WorkoutTemplateRepository, FakeTemplateRepository),
]


class TestProtocolDefinitions:
    """Test that every port defines its methods."""

    @pytest.mark.parametrize("port, methods", list(PORT_METHODS.items()))
    def test_has_required_methods(self, port, methods):
        for method in methods:
            assert hasattr(port, method), f"{port.__name__} missing {method}"


class TestImplementationsSatisfyProtocols:
    """Test that adapters and fakes implement their port."""

    @pytest.mark.parametrize(
        "port, implementation",
        IMPLEMENTATIONS,
        ids=[impl.__name__ for _, impl in IMPLEMENTATIONS],
    )
    def test_methods_present_and_async(self, port, implementation):
        for method in PORT_METHODS[port]:
            attr = getattr(implementation, method, None)
            assert attr is not None, f"{implementation.__name__} missing {method}"
            assert inspect.iscoroutinefunction(attr), f"{implementation.__name__}.{method} must be async"

    @pytest.mark.parametrize(
        "port, implementation",
        IMPLEMENTATIONS,
        ids=[impl.__name__ for _, impl in IMPLEMENTATIONS],
    )
    def test_signatures_match(self, port, implementation):
        for method in PORT_METHODS[port]:
            expected = list(inspect.signature(getattr(port, method)).parameters)
            actual = list(inspect.signature(getattr(implementation, method)).parameters)
            assert actual == expected, f"{implementation.__name__}.{method}"
