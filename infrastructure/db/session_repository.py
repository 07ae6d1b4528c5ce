"""
Supabase implementation of SessionRepository.

Each session is one row. The full aggregate lives in the ``data`` JSON
column; ``state``, ``template_id``, ``start_date`` and ``end_date`` are
copied into plain columns for querying.

Expected table (``settings.sessions_table``):

    create table workout_sessions (
        id text primary key,
        state text not null,
        template_id text,
        start_date timestamptz not null,
        end_date timestamptz,
        data jsonb not null,
        updated_at timestamptz not null default now()
    );
    create unique index one_open_session on workout_sessions ((true))
        where state in ('active', 'paused');

The unique index backs up the check in ``save`` against concurrent writers.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import AsyncClient

from domain.exceptions import ActiveSessionExists, SessionNotFound
from domain.models import SessionState, WorkoutSession
from infrastructure.db.retry import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_WAIT_SECONDS,
    DEFAULT_MIN_WAIT_SECONDS,
    create_retry_decorator,
)

logger = logging.getLogger(__name__)

OPEN_STATES: List[str] = [SessionState.ACTIVE.value, SessionState.PAUSED.value]


class SupabaseSessionRepository:
    """
    Supabase implementation of SessionRepository protocol.

    All Supabase query logic for sessions is encapsulated here. The client
    is injected via constructor for testability. Transient failures are
    retried inside this adapter; anything else propagates to the use case,
    which wraps it in PersistenceFailure.
    """

    def __init__(
        self,
        client: AsyncClient,
        *,
        table: str = "workout_sessions",
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        min_wait_seconds: float = DEFAULT_MIN_WAIT_SECONDS,
        max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS,
    ):
        """
        Initialize with Supabase client.

        Args:
            client: Async Supabase client instance (injected, not global)
            table: Table holding the sessions
            max_attempts: Attempts per call for transient errors
            min_wait_seconds: Minimum backoff between attempts
            max_wait_seconds: Maximum backoff between attempts
        """
        self._client = client
        self._table = table
        self._retry = create_retry_decorator(max_attempts, min_wait_seconds, max_wait_seconds)

    # =========================================================================
    # Row mapping
    # =========================================================================

    @staticmethod
    def _to_row(session: WorkoutSession) -> Dict[str, Any]:
        data = session.model_dump(mode="json")
        return {
            "id": session.id,
            "state": session.state.value,
            "template_id": session.template_id,
            "start_date": data["start_date"],
            "end_date": data["end_date"],
            "data": data,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

    @staticmethod
    def _from_row(row: Dict[str, Any]) -> WorkoutSession:
        return WorkoutSession.model_validate(row["data"])

    # =========================================================================
    # Queries
    # =========================================================================

    async def fetch_active(self) -> Optional[WorkoutSession]:
        async def query():
            return await (
                self._client.table(self._table)
                .select("data")
                .in_("state", OPEN_STATES)
                .order("start_date", desc=True)
                .limit(1)
                .execute()
            )

        result = await self._retry(query)()
        if result.data:
            return self._from_row(result.data[0])
        return None

    async def fetch(self, session_id: str) -> Optional[WorkoutSession]:
        async def query():
            return await (
                self._client.table(self._table)
                .select("data")
                .eq("id", session_id)
                .limit(1)
                .execute()
            )

        result = await self._retry(query)()
        if result.data:
            return self._from_row(result.data[0])
        return None

    # =========================================================================
    # Writes
    # =========================================================================

    async def save(self, session: WorkoutSession) -> None:
        if session.is_open:
            existing = await self.fetch_active()
            if existing is not None and existing.id != session.id:
                raise ActiveSessionExists(existing.id)

        row = self._to_row(session)

        async def query():
            return await self._client.table(self._table).insert(row).execute()

        try:
            await self._retry(query)()
        except Exception as e:
            error_msg = str(e).lower()
            if "duplicate key" in error_msg or "23505" in error_msg:
                # Lost a race against another writer; the unique index rejected us
                existing = await self.fetch_active()
                raise ActiveSessionExists(existing.id if existing else "unknown") from e
            raise
        logger.info(f"Session {session.id} saved ({session.state.value})")

    async def update(self, session: WorkoutSession) -> None:
        row = self._to_row(session)

        async def query():
            return await (
                self._client.table(self._table)
                .update(row)
                .eq("id", session.id)
                .execute()
            )

        result = await self._retry(query)()
        if not result.data:
            raise SessionNotFound(session.id)

    async def delete(self, session_id: str) -> None:
        async def query():
            return await (
                self._client.table(self._table).delete().eq("id", session_id).execute()
            )

        await self._retry(query)()
        logger.info(f"Session {session_id} deleted")
