"""Tests for SessionManager."""

import pytest

from scoremanager.auth.access import Identity
from scoremanager.web.sessions import (
    Session,
    SessionManager,
    get_session_manager,
    reset_session_manager,
)


@pytest.fixture
def manager():
    """Create fresh session manager."""
    return SessionManager()


@pytest.fixture
def identity():
    return Identity(email="admin@example.com")


class TestSessionManagerCreate:
    """Tests for session creation."""

    @pytest.mark.asyncio
    async def test_create_session_returns_session(self, manager, identity, store):
        session = await manager.create_session(identity, store)
        assert isinstance(session, Session)
        assert session.identity == identity
        assert session.created_at

    @pytest.mark.asyncio
    async def test_create_session_unique_ids(self, manager, identity, store):
        s1 = await manager.create_session(identity, store)
        s2 = await manager.create_session(identity, store)
        assert s1.session_id != s2.session_id

    @pytest.mark.asyncio
    async def test_boards_are_independent(self, manager, identity, store):
        """Each session mirrors the store on its own."""
        s1 = await manager.create_session(identity, store)
        s2 = await manager.create_session(identity, store)
        await s1.board.add_student("Kim", "high school", 1)
        assert len(s1.board.state.students) == 1
        assert s2.board.state.students == ()
        await s2.board.refresh()
        assert len(s2.board.state.students) == 1

    @pytest.mark.asyncio
    async def test_board_starts_unloaded(self, manager, identity, store):
        session = await manager.create_session(identity, store)
        assert not session.board.state.loaded


class TestSessionManagerGetEnd:
    """Tests for retrieval and ending."""

    @pytest.mark.asyncio
    async def test_get_session(self, manager, identity, store):
        created = await manager.create_session(identity, store)
        assert await manager.get_session(created.session_id) is created
        assert await manager.get_session("nope") is None

    @pytest.mark.asyncio
    async def test_end_session_clears_mirror(self, manager, identity, store):
        store.create_student("Kim", "high school", 1)
        session = await manager.create_session(identity, store)
        await session.board.refresh()

        ended = await manager.end_session(session.session_id)
        assert ended is session
        assert session.board.state.students == ()
        assert await manager.get_session_count() == 0

    @pytest.mark.asyncio
    async def test_end_unknown_session(self, manager):
        assert await manager.end_session("nope") is None

    @pytest.mark.asyncio
    async def test_to_dict(self, manager, identity, store):
        session = await manager.create_session(identity, store)
        data = session.to_dict()
        assert data["email"] == "admin@example.com"
        assert data["student_count"] == 0


class TestGlobalSessionManager:
    """Tests for the global instance."""

    def test_singleton(self):
        assert get_session_manager() is get_session_manager()

    def test_reset(self):
        before = get_session_manager()
        reset_session_manager()
        assert get_session_manager() is not before
