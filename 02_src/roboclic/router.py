"""CommandRouter: routes inbound events to command and dialogue endpoints."""

from typing import Protocol

from .access import IAccessGate
from .commands import CommandHandlers, parse_command
from .dialogue import DialogueStore, IPollDialogue
from .logging_config import get_logger
from .messenger import IMessenger
from .models import (
    CallbackSelection,
    ChooseTarget,
    InboundEvent,
    IncomingMessage,
    SetQuote,
)
from .quiz import QuizCompositionError

logger = get_logger(__name__)

FAILED_ACTION = "L'action a échoué."
QUIZ_ABORTED = "Impossible de créer le quiz, recommencez avec /poll."


class ICommandRouter(Protocol):
    """Entry point for every inbound event."""

    async def dispatch(self, event: InboundEvent) -> None:
        """Route one event. Never raises for handling errors."""
        ...


class CommandRouter:
    """Routes events: commands first, then the chat's pending dialogue step.

    A message holding one of our commands goes through the AccessGate and,
    if admitted, to its endpoint. Any other message or button press is
    matched against the chat's dialogue state. Everything touching the
    dialogue of a chat runs under that chat's lock.
    """

    def __init__(
        self,
        gate: IAccessGate,
        handlers: CommandHandlers,
        poll_dialogue: IPollDialogue,
        dialogues: DialogueStore,
        messenger: IMessenger,
        bot_username: str | None = None,
    ):
        self._gate = gate
        self._handlers = handlers
        self._poll_dialogue = poll_dialogue
        self._dialogues = dialogues
        self._messenger = messenger
        self._bot_username = bot_username

    async def dispatch(self, event: InboundEvent) -> None:
        """Route one event, reporting failures to the chat."""
        async with self._dialogues.lock(event.chat_id):
            try:
                if isinstance(event, IncomingMessage):
                    await self._on_message(event)
                elif isinstance(event, CallbackSelection):
                    await self._on_selection(event)
            except QuizCompositionError as e:
                logger.error("Quiz aborted: %s", e, extra={"chat_id": event.chat_id})
                await self._notify(event.chat_id, QUIZ_ABORTED)
            except Exception as e:
                logger.error(
                    "Error handling event in chat %s: %s",
                    event.chat_id,
                    e,
                    exc_info=True,
                )
                await self._notify(event.chat_id, FAILED_ACTION)

    async def _on_message(self, message: IncomingMessage) -> None:
        parsed = parse_command(message.text, self._bot_username)
        if parsed is not None:
            command = parsed.command
            if not await self._gate.admits(
                command.access, command.key, message.chat_id, message.sender_id
            ):
                logger.info(
                    "Denied /%s",
                    command.text,
                    extra={"chat_id": message.chat_id, "command": command.key},
                )
                return
            await self._handlers.handle(parsed, message)
            return

        state = self._dialogues.get(message.chat_id)
        if isinstance(state, SetQuote):
            await self._poll_dialogue.set_quote(message, state)

    async def _on_selection(self, selection: CallbackSelection) -> None:
        state = self._dialogues.get(selection.chat_id)
        if isinstance(state, ChooseTarget):
            await self._poll_dialogue.choose_target(selection, state)
        else:
            logger.debug("Ignoring selection outside of a member choice")
            await self._messenger.answer_selection(selection.callback_id)

    async def _notify(self, chat_id: str, text: str) -> None:
        try:
            await self._messenger.send_message(chat_id, text)
        except Exception as e:
            logger.error("Could not notify chat %s: %s", chat_id, e)
