"""
Dependency wiring for the session engine.

``SessionEngine`` builds every use case from the four ports and the
settings, the way a web app would register its providers once per
process.

Usage:
    engine = build_in_memory_engine(templates=[push_day], catalog=[bench])
    session = await engine.start_session.execute(push_day.id)
    session = await engine.add_warmup_sets.execute(session.id, session.exercises[0].id)
    await engine.end_session.execute(session.id)
    await engine.shutdown()
"""

import logging
from typing import Iterable, Optional

from application.ports import (
    ExerciseCatalog,
    HealthExporter,
    SessionRepository,
    WorkoutTemplateRepository,
)
from application.services.health_sync import HealthSyncService
from application.use_cases import (
    AddExerciseToSessionUseCase,
    AddSetUseCase,
    AddWarmupSetsToAllExercisesUseCase,
    AddWarmupSetsUseCase,
    AdvanceToNextRoundUseCase,
    CancelSessionUseCase,
    CompleteGroupSetUseCase,
    EndSessionUseCase,
    FinishExerciseUseCase,
    GetActiveSessionUseCase,
    PauseSessionUseCase,
    RemoveSetUseCase,
    ReorderExercisesUseCase,
    ResumeSessionUseCase,
    StartSessionUseCase,
    ToggleSetCompletionUseCase,
    UpdateAllSetsUseCase,
    UpdateExerciseNotesUseCase,
    UpdateGroupSetUseCase,
    UpdateSetUseCase,
)
from application.use_cases.base import Clock
from domain.clock import utc_now
from domain.models import CatalogExercise, WorkoutTemplate
from domain.services.warmup_calculator import WarmupCalculator
from infrastructure.db import SupabaseSessionRepository, create_supabase_client
from infrastructure.memory import (
    InMemoryExerciseCatalog,
    InMemorySessionRepository,
    InMemoryWorkoutTemplateRepository,
    LoggingHealthExporter,
)
from session_engine.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class SessionEngine:
    """
    All session use cases wired to one set of collaborators.

    Args:
        session_repo: Session storage
        template_repo: Template source
        catalog: Exercise catalog
        health_exporter: Health store adapter
        settings: Engine settings (defaults to get_settings())
        clock: Source of "now" shared by every use case
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        template_repo: WorkoutTemplateRepository,
        catalog: ExerciseCatalog,
        health_exporter: HealthExporter,
        settings: Optional[Settings] = None,
        *,
        clock: Clock = utc_now,
    ) -> None:
        self.settings = settings or get_settings()
        self.session_repo = session_repo
        self.template_repo = template_repo
        self.catalog = catalog

        s = self.settings
        self.health_sync = HealthSyncService(
            session_repo,
            health_exporter,
            enabled=s.health_export_enabled,
            met=s.health_export_met,
            body_weight_kg=s.health_export_body_weight_kg,
            activity_type=s.health_activity_type,
        )
        self.warmup_calculator = WarmupCalculator(s.warmup_config())

        # Lifecycle
        self.start_session = StartSessionUseCase(
            session_repo, template_repo, catalog, self.health_sync, clock=clock
        )
        self.end_session = EndSessionUseCase(session_repo, self.health_sync, clock=clock)
        self.cancel_session = CancelSessionUseCase(session_repo, self.health_sync, clock=clock)
        self.pause_session = PauseSessionUseCase(session_repo, clock=clock)
        self.resume_session = ResumeSessionUseCase(session_repo, clock=clock)
        self.get_active_session = GetActiveSessionUseCase(session_repo)

        # Sets
        self.add_set = AddSetUseCase(session_repo, catalog, clock=clock)
        self.remove_set = RemoveSetUseCase(session_repo, clock=clock)
        self.update_set = UpdateSetUseCase(session_repo, catalog, clock=clock)
        self.update_all_sets = UpdateAllSetsUseCase(session_repo, catalog, clock=clock)
        self.toggle_set_completion = ToggleSetCompletionUseCase(session_repo, clock=clock)

        # Warmups
        self.add_warmup_sets = AddWarmupSetsUseCase(
            session_repo,
            self.warmup_calculator,
            default_strategy=s.default_warmup_strategy,
            clock=clock,
        )
        self.add_warmup_sets_to_all = AddWarmupSetsToAllExercisesUseCase(
            session_repo,
            self.warmup_calculator,
            default_strategy=s.default_warmup_strategy,
            clock=clock,
        )

        # Exercises
        self.finish_exercise = FinishExerciseUseCase(session_repo, clock=clock)
        self.reorder_exercises = ReorderExercisesUseCase(session_repo, clock=clock)
        self.add_exercise = AddExerciseToSessionUseCase(
            session_repo,
            catalog,
            default_set_count=s.default_set_count,
            default_reps=s.default_reps,
            default_rest_time=s.default_rest_time_seconds,
            clock=clock,
        )
        self.update_exercise_notes = UpdateExerciseNotesUseCase(
            session_repo, max_notes_length=s.max_notes_length, clock=clock
        )

        # Groups
        self.complete_group_set = CompleteGroupSetUseCase(session_repo, clock=clock)
        self.advance_to_next_round = AdvanceToNextRoundUseCase(session_repo, clock=clock)
        self.update_group_set = UpdateGroupSetUseCase(session_repo, clock=clock)

    async def shutdown(self) -> None:
        """Wait for pending background export tasks."""
        pending = self.health_sync.pending_count
        if pending:
            logger.info(f"Waiting for {pending} health export task(s)")
        await self.health_sync.drain()


def build_in_memory_engine(
    templates: Iterable[WorkoutTemplate] = (),
    catalog: Iterable[CatalogExercise] = (),
    settings: Optional[Settings] = None,
    *,
    clock: Clock = utc_now,
) -> SessionEngine:
    """Engine backed entirely by in-memory adapters and a logging exporter."""
    return SessionEngine(
        session_repo=InMemorySessionRepository(),
        template_repo=InMemoryWorkoutTemplateRepository(templates),
        catalog=InMemoryExerciseCatalog(catalog),
        health_exporter=LoggingHealthExporter(),
        settings=settings,
        clock=clock,
    )


async def build_supabase_engine(
    template_repo: WorkoutTemplateRepository,
    catalog: ExerciseCatalog,
    health_exporter: Optional[HealthExporter] = None,
    settings: Optional[Settings] = None,
) -> SessionEngine:
    """
    Engine storing sessions in Supabase.

    Templates, catalog and health store are owned by other services and
    must be supplied by the caller.
    """
    settings = settings or get_settings()
    client = await create_supabase_client(settings)
    session_repo = SupabaseSessionRepository(
        client,
        table=settings.sessions_table,
        max_attempts=settings.repository_max_attempts,
        min_wait_seconds=settings.repository_min_wait_seconds,
        max_wait_seconds=settings.repository_max_wait_seconds,
    )
    logger.info(f"Session engine using Supabase table {settings.sessions_table!r}")
    return SessionEngine(
        session_repo=session_repo,
        template_repo=template_repo,
        catalog=catalog,
        health_exporter=health_exporter or LoggingHealthExporter(),
        settings=settings,
    )
