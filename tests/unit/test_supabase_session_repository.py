"""
Unit tests for the Supabase session repository and its retry policy.

The Supabase client is replaced by a MagicMock whose query builder returns
itself, so no database is required.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from domain.exceptions import ActiveSessionExists, InvalidInput, SessionNotFound
from domain.models import SessionState
from infrastructure.db.retry import create_retry_decorator, is_retryable_error
from infrastructure.db.session_repository import OPEN_STATES, SupabaseSessionRepository
from tests.fakes import FIXED_NOW, make_group_session, make_session

pytestmark = pytest.mark.unit


def result(*sessions):
    return SimpleNamespace(data=[{"data": s.model_dump(mode="json")} for s in sessions])


def make_client(*responses):
    """Client whose successive ``execute()`` calls return/raise ``responses``."""
    query = MagicMock()
    for name in ("select", "in_", "eq", "order", "limit", "insert", "update", "delete"):
        getattr(query, name).return_value = query
    query.execute = AsyncMock(side_effect=list(responses))
    client = MagicMock()
    client.table.return_value = query
    return client, query


def make_repo(client):
    return SupabaseSessionRepository(
        client, table="sessions", min_wait_seconds=0.01, max_wait_seconds=0.01
    )


# =============================================================================
# Reads
# =============================================================================


class TestReads:
    """Tests for fetch and fetch_active."""

    async def test_fetch_parses_row(self):
        session = make_group_session()
        client, query = make_client(result(session))

        fetched = await make_repo(client).fetch("group-session")

        assert fetched == session
        client.table.assert_called_with("sessions")
        query.eq.assert_called_with("id", "group-session")

    async def test_fetch_missing(self):
        client, _ = make_client(result())
        assert await make_repo(client).fetch("missing") is None

    async def test_fetch_active_filters_open_states(self):
        client, query = make_client(result(make_session()))

        active = await make_repo(client).fetch_active()

        assert active.id == "session-1"
        query.in_.assert_called_with("state", OPEN_STATES)
        assert OPEN_STATES == ["active", "paused"]


# =============================================================================
# Writes
# =============================================================================


class TestSave:
    """Tests for inserting sessions."""

    async def test_insert_row_shape(self):
        session = make_session()
        client, query = make_client(result(), SimpleNamespace(data=[{}]))

        await make_repo(client).save(session)

        row = query.insert.call_args.args[0]
        assert row["id"] == "session-1"
        assert row["state"] == "active"
        assert row["template_id"] == "tpl-1"
        assert row["end_date"] is None
        assert row["data"]["exercises"][0]["id"] == "ex-1"

    async def test_rejects_second_open_session(self):
        client, query = make_client(result(make_session("other")))

        with pytest.raises(ActiveSessionExists) as exc_info:
            await make_repo(client).save(make_session())

        assert exc_info.value.existing_session_id == "other"
        query.insert.assert_not_called()

    async def test_completed_session_skips_open_check(self):
        done = make_session().with_state(SessionState.COMPLETED, end_date=FIXED_NOW)
        client, query = make_client(SimpleNamespace(data=[{}]))

        await make_repo(client).save(done)

        assert query.execute.await_count == 1
        assert query.insert.call_args.args[0]["end_date"] is not None

    async def test_unique_index_race(self):
        client, _ = make_client(
            result(),
            Exception('duplicate key value violates unique constraint "one_open_session" (23505)'),
            result(make_session("winner")),
        )

        with pytest.raises(ActiveSessionExists) as exc_info:
            await make_repo(client).save(make_session())
        assert exc_info.value.existing_session_id == "winner"


class TestUpdateDelete:
    """Tests for replacing and deleting rows."""

    async def test_update_replaces_row(self):
        session = make_session()
        client, query = make_client(SimpleNamespace(data=[{"id": "session-1"}]))

        await make_repo(client).update(session)

        query.update.assert_called_once()
        query.eq.assert_called_with("id", "session-1")

    async def test_update_missing_row(self):
        client, _ = make_client(SimpleNamespace(data=[]))
        with pytest.raises(SessionNotFound):
            await make_repo(client).update(make_session())

    async def test_delete(self):
        client, query = make_client(SimpleNamespace(data=[]))
        await make_repo(client).delete("session-1")
        query.delete.assert_called_once()
        query.eq.assert_called_with("id", "session-1")


# =============================================================================
# Retry
# =============================================================================


class TestRetry:
    """Tests for transient-failure handling."""

    async def test_transient_error_retried(self):
        session = make_session()
        client, query = make_client(ConnectionError("connection reset by peer"), result(session))

        assert await make_repo(client).fetch("session-1") == session
        assert query.execute.await_count == 2

    async def test_gives_up_after_max_attempts(self):
        client, query = make_client(*[TimeoutError("request timed out")] * 3)

        with pytest.raises(TimeoutError):
            await make_repo(client).fetch("session-1")
        assert query.execute.await_count == 3

    async def test_permanent_error_not_retried(self):
        client, query = make_client(Exception("new row violates row-level security policy"))

        with pytest.raises(Exception, match="row-level security"):
            await make_repo(client).fetch("session-1")
        assert query.execute.await_count == 1

    @pytest.mark.parametrize(
        "error, expected",
        [
            (Exception("429 Too Many Requests"), True),
            (Exception("rate limit exceeded"), True),
            (Exception("503 Service Unavailable"), True),
            (TimeoutError("timed out"), True),
            (ConnectionError("connection refused"), True),
            (Exception("401 invalid JWT"), False),
            (Exception("bad request"), False),
            (SessionNotFound("session-1"), False),
            (InvalidInput("connection timeout wording in a domain error"), False),
        ],
    )
    def test_is_retryable_error(self, error, expected):
        assert is_retryable_error(error) is expected

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_attempts": 0},
            {"min_wait_seconds": 0},
            {"max_wait_seconds": -1},
            {"min_wait_seconds": 5, "max_wait_seconds": 1},
        ],
    )
    def test_invalid_retry_params(self, kwargs):
        with pytest.raises(ValueError):
            create_retry_decorator(**kwargs)
