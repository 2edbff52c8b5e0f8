"""PollDialogue: the three steps building a "who said it?" quiz."""

from typing import Protocol

from ..logging_config import get_logger
from ..messenger import IMessenger
from ..models import CallbackSelection, ChooseTarget, IncomingMessage, SetQuote, Start
from ..quiz import MAX_OPTIONS, compose_quiz
from ..storage import IStorage
from .store import DialogueStore

logger = get_logger(__name__)

TARGET_PROMPT = "Qui l'a dit ?"
QUOTE_PROMPT = "Qu'a-t-il ou elle dit ?"


class IPollDialogue(Protocol):
    """Quiz creation dialogue of a chat."""

    async def start(self, message: IncomingMessage) -> None:
        """Handle /poll: ask which member said the quote."""
        ...

    async def choose_target(self, selection: CallbackSelection, state: ChooseTarget) -> None:
        """Handle the member selection: ask for the quote."""
        ...

    async def set_quote(self, message: IncomingMessage, state: SetQuote) -> None:
        """Handle the quote: send the quiz."""
        ...


class PollDialogue:
    """Drives the quiz dialogue and records each step in the DialogueStore.

    Callers hold the chat lock from DialogueStore.lock() around every call.
    """

    def __init__(
        self,
        messenger: IMessenger,
        storage: IStorage,
        dialogues: DialogueStore,
        max_options: int = MAX_OPTIONS,
    ):
        self._messenger = messenger
        self._storage = storage
        self._dialogues = dialogues
        self._max_options = max_options

    async def start(self, message: IncomingMessage) -> None:
        """Send the member chooser and wait for a selection."""
        chat_id = message.chat_id
        logger.info("Starting /poll dialogue", extra={"chat_id": chat_id})

        previous = self._dialogues.get(chat_id)
        if not isinstance(previous, Start):
            logger.debug("Restarting pending dialogue, removing stale prompt")
            self._dialogues.reset(chat_id)
            await self._messenger.delete_message(chat_id, previous.message_id)

        logger.debug("Removing /poll message")
        await self._messenger.delete_message(chat_id, message.message_id)

        committee = await self._storage.list_members()

        logger.debug("Sending member chooser")
        prompt_id = await self._messenger.send_choice(
            chat_id, TARGET_PROMPT, [member.name for member in committee]
        )

        logger.debug("Updating dialogue to ChooseTarget")
        self._dialogues.set(chat_id, ChooseTarget(message_id=prompt_id))

    async def choose_target(self, selection: CallbackSelection, state: ChooseTarget) -> None:
        """Remember the selected member and ask for the quote."""
        chat_id = selection.chat_id
        await self._messenger.answer_selection(selection.callback_id)

        if selection.message_id is not None and selection.message_id != state.message_id:
            logger.debug(
                "Ignoring selection on stale message %s", selection.message_id
            )
            return

        logger.debug("Removing target query message")
        await self._messenger.delete_message(chat_id, state.message_id)

        logger.debug("Sending quote query message")
        prompt_id = await self._messenger.send_message(chat_id, QUOTE_PROMPT)

        logger.debug("Updating dialogue to SetQuote")
        self._dialogues.set(chat_id, SetQuote(message_id=prompt_id, target=selection.data))

    async def set_quote(self, message: IncomingMessage, state: SetQuote) -> None:
        """
        Send the quiz about the received quote.

        The dialogue is back to Start once this returns or raises.

        Raises:
            QuizCompositionError: If the target left the committee meanwhile.
        """
        if message.text is None:
            return

        chat_id = message.chat_id
        logger.debug("Resetting dialogue status")
        self._dialogues.reset(chat_id)

        logger.debug("Removing quote query message")
        await self._messenger.delete_message(chat_id, state.message_id)
        logger.debug("Removing quote message")
        await self._messenger.delete_message(chat_id, message.message_id)

        committee = await self._storage.list_members()
        draft = compose_quiz(
            [member.name for member in committee],
            state.target,
            max_options=self._max_options,
        )

        logger.debug("Sending quiz")
        await self._messenger.send_quiz(
            chat_id,
            f'Qui a dit: "{message.text}" ?',
            draft.options,
            draft.correct_index,
        )

        if not await self._storage.increment_quiz_count(state.target):
            logger.warning("%s is no longer a committee member", state.target)
