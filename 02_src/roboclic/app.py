"""Application bootstrap and lifecycle management."""

from typing import Protocol

from .access import AccessGate
from .commands import CommandHandlers
from .config import Settings, get_settings, resolve_db_path
from .dialogue import DialogueStore, PollDialogue
from .logging_config import get_logger
from .messenger import IMessenger, TelegramMessenger
from .router import CommandRouter
from .storage import IStorage, Storage

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Reset data between test runs."""
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        db_path: str | None = None,
        messenger: IMessenger | None = None,
        settings: Settings | None = None,
    ):
        self._settings = settings or get_settings()
        env_db_path = self._settings.database_url if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)

        # Components (will be initialized in start())
        self._storage: IStorage | None = None
        self._messenger: IMessenger | None = messenger
        self._owns_messenger = messenger is None
        self._dialogues: DialogueStore | None = None
        self._gate: AccessGate | None = None
        self._poll_dialogue: PollDialogue | None = None
        self._handlers: CommandHandlers | None = None
        self._router: CommandRouter | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Storage (no dependencies)
        self._storage = Storage(self._db_path)
        await self._storage.init()
        logger.info("Storage initialized")

        # 2. Messenger (no internal dependencies)
        bot_username = None
        if self._owns_messenger:
            telegram = TelegramMessenger(self._settings.bot_token)
            await telegram.start()
            bot_username = telegram.bot.username
            if self._settings.webhook_url:
                await telegram.register_webhook(
                    self._settings.webhook_url, self._settings.webhook_secret
                )
            self._messenger = telegram
        logger.info("Messenger initialized")

        # 3. DialogueStore + AccessGate (depend on Storage)
        self._dialogues = DialogueStore()
        self._gate = AccessGate(self._storage)

        # 4. PollDialogue (depends on Messenger, Storage, DialogueStore)
        self._poll_dialogue = PollDialogue(
            messenger=self._messenger,
            storage=self._storage,
            dialogues=self._dialogues,
        )

        # 5. CommandHandlers (depends on PollDialogue)
        self._handlers = CommandHandlers(
            messenger=self._messenger,
            storage=self._storage,
            poll_dialogue=self._poll_dialogue,
            admin_token=self._settings.admin_token,
        )

        # 6. CommandRouter (depends on everything above)
        self._router = CommandRouter(
            gate=self._gate,
            handlers=self._handlers,
            poll_dialogue=self._poll_dialogue,
            dialogues=self._dialogues,
            messenger=self._messenger,
            bot_username=bot_username,
        )
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._owns_messenger and isinstance(self._messenger, TelegramMessenger):
            await self._messenger.stop()
            self._messenger = None
        if self._storage:
            await self._storage.close()
            logger.info("Storage closed")

    async def reset(self) -> None:
        """Reset data between test runs."""
        if self._dialogues:
            self._dialogues.clear()
        if self._storage:
            await self._storage.clear()
            logger.info("Storage cleared")

    @property
    def storage(self) -> IStorage:
        """Get storage instance."""
        if not self._storage:
            raise RuntimeError("Application not started")
        return self._storage

    @property
    def messenger(self) -> IMessenger:
        """Get messenger instance."""
        if not self._messenger:
            raise RuntimeError("Application not started")
        return self._messenger

    @property
    def dialogues(self) -> DialogueStore:
        """Get dialogue store instance."""
        if not self._dialogues:
            raise RuntimeError("Application not started")
        return self._dialogues

    @property
    def router(self) -> CommandRouter:
        """Get command router instance."""
        if not self._router:
            raise RuntimeError("Application not started")
        return self._router

    @property
    def settings(self) -> Settings:
        return self._settings
