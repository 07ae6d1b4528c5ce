"""
Session Repository Interface (Port).

This module defines the abstract interface for session persistence.
Implementations may use Supabase, in-memory storage, or other backends.
The whole aggregate is stored and replaced as one unit.
"""
from typing import Optional, Protocol

from domain.models import WorkoutSession


class SessionRepository(Protocol):
    """
    Abstract interface for workout session storage.

    Implementations own the "at most one active or paused session"
    invariant: ``save`` must refuse a second open session even if the
    caller already checked ``fetch_active``.
    """

    async def fetch_active(self) -> Optional[WorkoutSession]:
        """
        Get the session in state active or paused.

        Returns:
            The open session, or None if there is none
        """
        ...

    async def fetch(self, session_id: str) -> Optional[WorkoutSession]:
        """
        Get a session by id.

        Args:
            session_id: Session UUID

        Returns:
            The stored session, or None if not found
        """
        ...

    async def save(self, session: WorkoutSession) -> None:
        """
        Insert a new session.

        Args:
            session: Session to insert

        Raises:
            ActiveSessionExists: If the session is open and another open
                session is already stored
        """
        ...

    async def update(self, session: WorkoutSession) -> None:
        """
        Replace a stored session with a new version.

        Args:
            session: Full aggregate to store

        Raises:
            SessionNotFound: If no session with this id is stored
        """
        ...

    async def delete(self, session_id: str) -> None:
        """
        Delete a session. Deleting an unknown id is a no-op.

        Args:
            session_id: Session UUID
        """
        ...
