"""DialogueStore: per-chat state of the quiz dialogue."""

import asyncio

from ..models import PollState, Start


class DialogueStore:
    """In-memory dialogue states, keyed by chat ID.

    States are lost when the process stops. Each chat also gets its own
    lock so that the transitions of one chat run one after the other.
    """

    def __init__(self):
        self._states: dict[str, PollState] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, chat_id: str) -> PollState:
        """Current state of a chat, Start if it never talked to the bot."""
        return self._states.get(chat_id, Start())

    def set(self, chat_id: str, state: PollState) -> None:
        self._states[chat_id] = state

    def reset(self, chat_id: str) -> None:
        self._states[chat_id] = Start()

    def lock(self, chat_id: str) -> asyncio.Lock:
        """Lock serializing the transitions of one chat."""
        if chat_id not in self._locks:
            self._locks[chat_id] = asyncio.Lock()
        return self._locks[chat_id]

    def clear(self) -> None:
        """Forget every dialogue and its lock."""
        self._states.clear()
        self._locks.clear()
