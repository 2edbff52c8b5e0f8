"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest_asyncio.fixture
async def storage():
    """Create in-memory storage for testing."""
    from roboclic.storage import Storage

    st = Storage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def settings():
    """Settings without any environment."""
    from roboclic.config import Settings

    return Settings(bot_token="123:test", admin_token="s3cret")


@pytest.fixture
def mock_messenger():
    """Create mock messenger. Sent messages get IDs 100, 101, ..."""
    messenger = Mock()
    counter = iter(range(100, 10_000))

    async def next_id(*args, **kwargs):
        return next(counter)

    messenger.delete_message = AsyncMock(return_value=None)
    messenger.send_message = AsyncMock(side_effect=next_id)
    messenger.send_choice = AsyncMock(side_effect=next_id)
    messenger.send_quiz = AsyncMock(side_effect=next_id)
    messenger.send_poll = AsyncMock(side_effect=next_id)
    messenger.answer_selection = AsyncMock(return_value=None)
    return messenger


@pytest.fixture
def dialogues():
    """Create empty DialogueStore."""
    from roboclic.dialogue import DialogueStore

    return DialogueStore()


@pytest.fixture
def gate(storage):
    """Create AccessGate over storage."""
    from roboclic.access import AccessGate

    return AccessGate(storage)


@pytest.fixture
def poll_dialogue(mock_messenger, storage, dialogues):
    """Create PollDialogue for testing."""
    from roboclic.dialogue import PollDialogue

    return PollDialogue(
        messenger=mock_messenger,
        storage=storage,
        dialogues=dialogues,
    )


@pytest.fixture
def handlers(mock_messenger, storage, poll_dialogue, settings):
    """Create CommandHandlers for testing."""
    from roboclic.commands import CommandHandlers

    return CommandHandlers(
        messenger=mock_messenger,
        storage=storage,
        poll_dialogue=poll_dialogue,
        admin_token=settings.admin_token,
    )


@pytest.fixture
def router(gate, handlers, poll_dialogue, dialogues, mock_messenger):
    """Create CommandRouter for testing."""
    from roboclic.router import CommandRouter

    return CommandRouter(
        gate=gate,
        handlers=handlers,
        poll_dialogue=poll_dialogue,
        dialogues=dialogues,
        messenger=mock_messenger,
        bot_username="roboclic_bot",
    )


@pytest_asyncio.fixture
async def committee(storage):
    """Committee of three members."""
    async with storage.transaction() as tx:
        for name in ["Alice", "Bob", "Carol"]:
            await tx.insert_member(name)
    return ["Alice", "Bob", "Carol"]


@pytest.fixture
def make_message():
    """Factory building IncomingMessages."""
    from roboclic.models import IncomingMessage

    def make(text, chat_id="chat1", sender_id="u1", message_id=1):
        return IncomingMessage(
            chat_id=chat_id, message_id=message_id, sender_id=sender_id, text=text
        )

    return make
