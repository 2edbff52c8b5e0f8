"""AccessGate: decides whether a chat may run a command."""

from enum import Enum
from typing import Protocol

from ..logging_config import get_logger
from ..storage import IStorage

logger = get_logger(__name__)


class AccessLevel(str, Enum):
    """What a command requires before it runs."""

    PUBLIC = "public"
    AUTHORIZED = "authorized"  # chat needs an authorization row
    ADMIN = "admin"  # sender needs to be an admin


class IAccessGate(Protocol):
    """Filters evaluated before a command endpoint runs."""

    async def is_command_authorized(self, chat_id: str, command_key: str) -> bool:
        """Check the chat was granted the command."""
        ...

    async def is_sender_admin(self, sender_id: str | None) -> bool:
        """Check the sender is an admin."""
        ...

    async def admits(
        self, level: AccessLevel, command_key: str, chat_id: str, sender_id: str | None
    ) -> bool:
        """Combine both predicates according to the command access level."""
        ...


class AccessGate:
    """Fail-closed access control over the authorization tables.

    A store failure is logged and read as a denial.
    """

    def __init__(self, storage: IStorage):
        self._storage = storage

    async def is_command_authorized(self, chat_id: str, command_key: str) -> bool:
        """True iff `chat_id` was granted `command_key`."""
        try:
            return await self._storage.is_authorized(chat_id, command_key)
        except Exception as e:
            logger.error(
                "Could not check authorization of /%s in chat %s: %s",
                command_key,
                chat_id,
                e,
                exc_info=True,
            )
            return False

    async def is_sender_admin(self, sender_id: str | None) -> bool:
        """True iff the sender is a registered admin. Anonymous senders never are."""
        if sender_id is None:
            return False
        try:
            return await self._storage.is_admin(sender_id)
        except Exception as e:
            logger.error(
                "Could not check admin rights of %s: %s", sender_id, e, exc_info=True
            )
            return False

    async def admits(
        self, level: AccessLevel, command_key: str, chat_id: str, sender_id: str | None
    ) -> bool:
        """Combine both predicates according to the command access level."""
        if level is AccessLevel.PUBLIC:
            return True
        if level is AccessLevel.AUTHORIZED:
            return await self.is_command_authorized(chat_id, command_key)
        if level is AccessLevel.ADMIN:
            return await self.is_sender_admin(sender_id)
        return False
