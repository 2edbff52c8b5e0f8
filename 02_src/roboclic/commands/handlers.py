"""Command endpoints run once the AccessGate let a command through."""

from typing import Awaitable, Callable

from ..dialogue import IPollDialogue
from ..logging_config import get_logger
from ..messenger import IMessenger
from ..models import IncomingMessage
from ..storage import IStorage
from .parser import Command, ParsedCommand

logger = get_logger(__name__)

Endpoint = Callable[[IncomingMessage, str], Awaitable[None]]

BUREAU_QUESTION = "Qui est au bureau ?"
BUREAU_OPTIONS = [
    "Je suis actuellement au bureau",
    "Je suis à proximité du bureau",
    "Je compte m'y rendre bientôt",
    "J'y suis pas",
    "Je suis à Satellite",
    "Je suis pas en Suisse",
]


class CommandHandlers:
    """One endpoint per Command.

    Mutations run in a single storage transaction each. Storage and
    transport errors propagate to the caller.
    """

    def __init__(
        self,
        messenger: IMessenger,
        storage: IStorage,
        poll_dialogue: IPollDialogue,
        admin_token: str,
    ):
        self._messenger = messenger
        self._storage = storage
        self._poll_dialogue = poll_dialogue
        self._admin_token = admin_token

        self._endpoints: dict[Command, Endpoint] = {
            Command.HELP: self.help,
            Command.BUREAU: self.bureau,
            Command.POLL: self.poll,
            Command.AUTHENTICATE: self.authenticate,
            Command.ADMIN_LIST: self.admin_list,
            Command.ADMIN_REMOVE: self.admin_remove,
            Command.AUTHORIZE: self.authorize,
            Command.UNAUTHORIZE: self.unauthorize,
            Command.AUTHORIZATIONS: self.authorizations,
            Command.STATS: self.stats,
            Command.COMMITTEE_ADD: self.committee_add,
            Command.COMMITTEE_REMOVE: self.committee_remove,
        }

    async def handle(self, parsed: ParsedCommand, message: IncomingMessage) -> None:
        """Run the endpoint of a parsed command."""
        await self._endpoints[parsed.command](message, parsed.args)

    async def _reply(self, message: IncomingMessage, text: str) -> None:
        await self._messenger.send_message(message.chat_id, text)

    async def help(self, message: IncomingMessage, args: str) -> None:
        await self._reply(message, Command.descriptions())

    async def bureau(self, message: IncomingMessage, args: str) -> None:
        await self._messenger.send_poll(message.chat_id, BUREAU_QUESTION, BUREAU_OPTIONS)

    async def poll(self, message: IncomingMessage, args: str) -> None:
        await self._poll_dialogue.start(message)

    async def authenticate(self, message: IncomingMessage, args: str) -> None:
        """Register the sender as admin when the token matches: /auth <token> <name>."""
        parts = args.split(" ")
        if len(parts) != 2 or not all(parts):
            await self._reply(message, "Usage: /auth <token> <nom>")
            return

        token, name = parts
        if token != self._admin_token or message.sender_id is None:
            logger.info("Rejected admin authentication", extra={"chat_id": message.chat_id})
            await self._reply(message, "Le token est incorrect")
            return

        await self._storage.insert_admin(message.sender_id, name)
        logger.info("%s authenticated as admin", name)
        await self._reply(message, "Authentification réussie !")

    async def admin_list(self, message: IncomingMessage, args: str) -> None:
        admins = await self._storage.list_admins()
        await self._reply(
            message,
            "Admin(s) actuel(s):\n" + "\n".join(f" - {name}" for name in admins),
        )

    async def admin_remove(self, message: IncomingMessage, args: str) -> None:
        """Remove every admin named `args`."""
        name = args
        if not name:
            await self._reply(message, "Usage: /adminremove <nom>")
            return

        async with self._storage.transaction() as tx:
            removed = 0
            if await tx.count_admins_named(name) > 0:
                removed = await tx.delete_admin_by_name(name)

        if removed == 0:
            await self._reply(message, f"{name} n'est pas admin")
            return

        await self._reply(message, f"{name} a été retiré(e) des admins")

    async def authorize(self, message: IncomingMessage, args: str) -> None:
        """Grant a command to this chat. Granting twice keeps one row."""
        command = args
        if not command:
            await self._reply(message, "Usage: /authorize <commande>")
            return

        async with self._storage.transaction() as tx:
            if not await tx.is_authorized(message.chat_id, command):
                await tx.insert_authorization(message.chat_id, command)

        await self._reply(
            message, f"Ce groupe peut désormais utiliser la commande /{command}"
        )

    async def unauthorize(self, message: IncomingMessage, args: str) -> None:
        """Revoke a command from this chat. Revoking twice is a no-op."""
        command = args
        if not command:
            await self._reply(message, "Usage: /unauthorize <commande>")
            return

        async with self._storage.transaction() as tx:
            if await tx.is_authorized(message.chat_id, command):
                await tx.delete_authorization(message.chat_id, command)

        await self._reply(
            message,
            f"Ce groupe ne peut désormais plus utiliser la commande /{command}",
        )

    async def authorizations(self, message: IncomingMessage, args: str) -> None:
        commands = await self._storage.list_authorized(message.chat_id)
        await self._reply(
            message,
            "Ce groupe peut utiliser les commandes suivantes:\n"
            + "\n".join(f" - {command}" for command in commands),
        )

    async def stats(self, message: IncomingMessage, args: str) -> None:
        committee = await self._storage.list_members()
        if not committee:
            await self._reply(message, "Le comité est vide")
            return

        await self._reply(
            message,
            "\n".join(f"- {m.name} (polls: {m.poll_count})" for m in committee),
        )

    async def committee_add(self, message: IncomingMessage, args: str) -> None:
        names = args.split()
        if not names:
            await self._reply(message, "Usage: /committeeadd <nom> [<nom> ...]")
            return

        async with self._storage.transaction() as tx:
            for name in names:
                await tx.insert_member(name)

        await self._reply(message, "Comité mis à jour !")

    async def committee_remove(self, message: IncomingMessage, args: str) -> None:
        names = args.split()
        if not names:
            await self._reply(message, "Usage: /committeeremove <nom> [<nom> ...]")
            return

        async with self._storage.transaction() as tx:
            for name in names:
                await tx.delete_member(name)

        await self._reply(message, "Comité mis à jour !")
