"""
Domain exceptions for the workout session engine.

Every operation in the domain and application layers is fail-fast: invalid
state is rejected with one of these exceptions before anything is mutated
or persisted. Callers can catch ``SessionEngineError`` to handle all of
them uniformly.
"""

from typing import List, Optional


class SessionEngineError(Exception):
    """Base class for all session engine errors."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


# =============================================================================
# Lookup failures
# =============================================================================


class SessionNotFound(SessionEngineError):
    """Raised when no session exists for the given id."""

    def __init__(self, session_id: str):
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class ExerciseNotFound(SessionEngineError):
    """Raised when an exercise id is not part of the session or catalog."""

    def __init__(self, exercise_id: str):
        super().__init__(f"Exercise not found: {exercise_id}")
        self.exercise_id = exercise_id


class SetNotFound(SessionEngineError):
    """Raised when a set id is not part of the exercise."""

    def __init__(self, set_id: str):
        super().__init__(f"Set not found: {set_id}")
        self.set_id = set_id


class GroupNotFound(SessionEngineError):
    """Raised when an exercise group id is not part of the session."""

    def __init__(self, group_id: str):
        super().__init__(f"Exercise group not found: {group_id}")
        self.group_id = group_id


class TemplateNotFound(SessionEngineError):
    """Raised when a workout template cannot be loaded."""

    def __init__(self, template_id: str):
        super().__init__(f"Workout template not found: {template_id}")
        self.template_id = template_id


# =============================================================================
# State and input failures
# =============================================================================


class ActiveSessionExists(SessionEngineError):
    """Raised when starting a session while another one is active or paused."""

    def __init__(self, existing_session_id: str):
        super().__init__(
            f"Cannot start a new session. Session {existing_session_id} is "
            "already active or paused."
        )
        self.existing_session_id = existing_session_id


class InvalidInput(SessionEngineError):
    """Raised for non-positive weight/reps and malformed configuration."""


class InvalidOperation(SessionEngineError):
    """Raised when an operation is not allowed in the current state."""


# =============================================================================
# Persistence failures
# =============================================================================


class PersistenceFailure(SessionEngineError):
    """
    Wraps an underlying storage error.

    The original exception is available as ``__cause__``. The core never
    retries; retry policy belongs to the repository adapter.
    """

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to {operation} session{detail}")
        self.operation = operation
