"""
StartSession Use Case.

Creates a new active session from a workout template, seeding set weights
and reps from the exercise catalog's last-used history.
"""

import logging
from typing import Dict, Optional

from pydantic import ValidationError

from application.ports import (
    ExerciseCatalog,
    SessionRepository,
    WorkoutTemplateRepository,
)
from application.services.health_sync import HealthSyncService
from application.use_cases.base import Clock, validation_to_invalid_input
from domain.clock import utc_now
from domain.exceptions import (
    ActiveSessionExists,
    PersistenceFailure,
    SessionEngineError,
    TemplateNotFound,
)
from domain.invariants import ensure_valid
from domain.models import CatalogExercise, WorkoutSession, WorkoutTemplate
from domain.services import session_lifecycle

logger = logging.getLogger(__name__)


class StartSessionUseCase:
    """
    Use case for starting a workout session.

    Orchestrates the following workflow:
    1. Reject the start if an active or paused session exists
    2. Load the template and the catalog entries it references
    3. Build the session snapshot
    4. Insert it (the repository re-checks the one-open-session rule)
    5. Schedule the health-store start in the background

    Usage:
        >>> use_case = StartSessionUseCase(
        ...     session_repo=session_repo,
        ...     template_repo=template_repo,
        ...     catalog=catalog,
        ... )
        >>> session = await use_case.execute("tpl-push-day")
    """

    def __init__(
        self,
        session_repo: SessionRepository,
        template_repo: WorkoutTemplateRepository,
        catalog: ExerciseCatalog,
        health_sync: Optional[HealthSyncService] = None,
        *,
        clock: Clock = utc_now,
    ) -> None:
        self._session_repo = session_repo
        self._template_repo = template_repo
        self._catalog = catalog
        self._health_sync = health_sync
        self._clock = clock

    async def execute(self, template_id: str) -> WorkoutSession:
        """
        Start a session from a template.

        Args:
            template_id: Template to start from

        Returns:
            The stored ACTIVE session

        Raises:
            ActiveSessionExists: If another session is active or paused
            TemplateNotFound: If the template does not exist
            PersistenceFailure: If the repository failed
        """
        existing = await self._fetch_active()
        if existing is not None:
            logger.warning(
                f"Refusing to start template {template_id}: session {existing.id} is "
                f"{existing.state.value}"
            )
            raise ActiveSessionExists(existing.id)

        template = await self._template_repo.fetch(template_id)
        if template is None:
            raise TemplateNotFound(template_id)

        catalog_entries = await self._fetch_catalog_entries(template)

        try:
            session = session_lifecycle.start(template, catalog_entries, now=self._clock())
        except ValidationError as e:
            raise validation_to_invalid_input(e) from e
        ensure_valid(session)

        try:
            await self._session_repo.save(session)
        except SessionEngineError:
            raise
        except Exception as e:
            logger.error(f"Failed to save session {session.id}: {e}")
            raise PersistenceFailure("save", e) from e

        logger.info(f"Started session {session.id} from template {template.name!r}")
        if self._health_sync is not None:
            self._health_sync.schedule_start(session)
        return session

    async def _fetch_active(self) -> Optional[WorkoutSession]:
        try:
            return await self._session_repo.fetch_active()
        except Exception as e:
            logger.error(f"Failed to fetch active session: {e}")
            raise PersistenceFailure("fetch active", e) from e

    async def _fetch_catalog_entries(
        self, template: WorkoutTemplate
    ) -> Dict[str, CatalogExercise]:
        """Load catalog entries; missing or failing lookups fall back to template targets."""
        entries: Dict[str, CatalogExercise] = {}
        for exercise_id in template.catalog_exercise_ids:
            try:
                entry = await self._catalog.fetch(exercise_id)
            except Exception as e:
                logger.warning(f"Catalog lookup failed for {exercise_id}: {e}")
                continue
            if entry is None:
                logger.warning(f"Exercise {exercise_id} missing from catalog")
                continue
            entries[exercise_id] = entry
        return entries
