"""Tests for AccessGate."""

import logging
from unittest.mock import AsyncMock, Mock

import aiosqlite
import pytest

from roboclic.access import AccessGate, AccessLevel


@pytest.fixture
def broken_storage():
    """Storage whose every query fails."""
    st = Mock()
    st.is_authorized = AsyncMock(side_effect=aiosqlite.OperationalError("database is locked"))
    st.is_admin = AsyncMock(side_effect=aiosqlite.OperationalError("database is locked"))
    return st


async def grant(storage, chat_id, command):
    async with storage.transaction() as tx:
        if not await tx.is_authorized(chat_id, command):
            await tx.insert_authorization(chat_id, command)


class TestIsCommandAuthorized:
    """Tests for AccessGate.is_command_authorized()."""

    async def test_unknown_chat_is_denied(self, gate):
        """Test that nothing is allowed by default."""
        assert await gate.is_command_authorized("chat1", "poll") is False

    async def test_grant_scoped_to_chat(self, gate, storage):
        """Test that a grant to chat1 does not leak to chat2."""
        await grant(storage, "chat1", "poll")

        assert await gate.is_command_authorized("chat1", "poll") is True
        assert await gate.is_command_authorized("chat2", "poll") is False
        assert await gate.is_command_authorized("chat1", "stats") is False

    async def test_store_failure_denies(self, broken_storage, caplog):
        """Test that a failing store is read as a denial and logged."""
        gate = AccessGate(broken_storage)

        with caplog.at_level(logging.ERROR, logger="roboclic.access.gate"):
            result = await gate.is_command_authorized("chat1", "poll")

        assert result is False
        assert "Could not check authorization" in caplog.text
        broken_storage.is_authorized.assert_awaited_once_with("chat1", "poll")

    async def test_closed_storage_denies(self):
        """Test that an uninitialized storage is read as a denial."""
        from roboclic.storage import Storage

        gate = AccessGate(Storage(":memory:"))
        assert await gate.is_command_authorized("chat1", "poll") is False


class TestIsSenderAdmin:
    """Tests for AccessGate.is_sender_admin()."""

    async def test_empty_store(self, gate):
        """Test that nobody is admin on an empty store."""
        assert await gate.is_sender_admin("u1") is False

    async def test_after_insert(self, gate, storage):
        """Test that an inserted admin is recognized."""
        await storage.insert_admin("u1", "Alice")
        assert await gate.is_sender_admin("u1") is True
        assert await gate.is_sender_admin("u2") is False

    async def test_anonymous_sender(self, storage):
        """Test that a missing identity never reaches the store."""
        storage_spy = Mock(wraps=storage)
        storage_spy.is_admin = AsyncMock(return_value=True)
        gate = AccessGate(storage_spy)

        assert await gate.is_sender_admin(None) is False
        storage_spy.is_admin.assert_not_awaited()

    async def test_store_failure_denies(self, broken_storage, caplog):
        """Test that a failing store is read as a denial and logged."""
        gate = AccessGate(broken_storage)

        with caplog.at_level(logging.ERROR, logger="roboclic.access.gate"):
            assert await gate.is_sender_admin("u1") is False

        assert "Could not check admin rights" in caplog.text


class TestAdmits:
    """Tests for AccessGate.admits()."""

    async def test_public_always_admitted(self, broken_storage):
        """Test that public commands skip the store."""
        gate = AccessGate(broken_storage)

        assert await gate.admits(AccessLevel.PUBLIC, "help", "chat1", None) is True
        broken_storage.is_authorized.assert_not_awaited()
        broken_storage.is_admin.assert_not_awaited()

    async def test_authorized_level(self, gate, storage):
        """Test that authorized commands need a grant for the chat."""
        assert await gate.admits(AccessLevel.AUTHORIZED, "poll", "chat1", "u1") is False
        await grant(storage, "chat1", "poll")
        assert await gate.admits(AccessLevel.AUTHORIZED, "poll", "chat1", "u1") is True

    async def test_admin_does_not_bypass_authorization(self, gate, storage):
        """Test that being admin does not grant authorized commands."""
        await storage.insert_admin("u1", "Alice")
        assert await gate.admits(AccessLevel.AUTHORIZED, "poll", "chat1", "u1") is False

    async def test_admin_level(self, gate, storage):
        """Test that admin commands need an admin sender, not a chat grant."""
        await grant(storage, "chat1", "adminlist")
        assert await gate.admits(AccessLevel.ADMIN, "adminlist", "chat1", "u1") is False

        await storage.insert_admin("u1", "Alice")
        assert await gate.admits(AccessLevel.ADMIN, "adminlist", "chat1", "u1") is True
        assert await gate.admits(AccessLevel.ADMIN, "adminlist", "chat1", None) is False
