"""Messenger implementation using the Telegram Bot API."""

from typing import Any, Protocol, Sequence

from telegram import Bot, InlineKeyboardButton, InlineKeyboardMarkup, Poll, Update

from ..logging_config import get_logger
from ..models import CallbackSelection, InboundEvent, IncomingMessage

logger = get_logger(__name__)

# buttons per row of the member chooser
CHOICES_PER_ROW = 3


class IMessenger(Protocol):
    """Outgoing side of the chat transport."""

    async def delete_message(self, chat_id: str, message_id: int) -> None:
        """Retract a message."""
        ...

    async def send_message(self, chat_id: str, text: str) -> int:
        """Send a text message. Return its ID."""
        ...

    async def send_choice(self, chat_id: str, text: str, options: Sequence[str]) -> int:
        """Send a message with one inline button per option. Return its ID."""
        ...

    async def send_quiz(
        self, chat_id: str, question: str, options: Sequence[str], correct_index: int
    ) -> int:
        """Send a non-anonymous quiz poll. Return its ID."""
        ...

    async def send_poll(self, chat_id: str, question: str, options: Sequence[str]) -> int:
        """Send a non-anonymous regular poll. Return its ID."""
        ...

    async def answer_selection(self, callback_id: str) -> None:
        """Acknowledge an inline button press."""
        ...


def chooser_keyboard(options: Sequence[str]) -> InlineKeyboardMarkup:
    """Lay options out as buttons, CHOICES_PER_ROW per row."""
    buttons = [InlineKeyboardButton(name, callback_data=name) for name in options]
    rows = [
        buttons[i : i + CHOICES_PER_ROW]
        for i in range(0, len(buttons), CHOICES_PER_ROW)
    ]
    return InlineKeyboardMarkup(rows)


class TelegramMessenger:
    """Telegram Bot API messenger."""

    def __init__(self, token: str):
        self._bot = Bot(token=token)

    @property
    def bot(self) -> Bot:
        return self._bot

    async def start(self) -> None:
        """Open the HTTP session and fetch the bot identity."""
        await self._bot.initialize()
        logger.info("Telegram bot @%s ready", self._bot.username)

    async def stop(self) -> None:
        await self._bot.shutdown()

    async def register_webhook(self, url: str, secret_token: str | None = None) -> None:
        """Ask Telegram to push updates to `url`."""
        await self._bot.set_webhook(
            url=url,
            secret_token=secret_token,
            allowed_updates=[Update.MESSAGE, Update.CALLBACK_QUERY],
        )
        logger.info("Webhook registered: %s", url)

    async def delete_message(self, chat_id: str, message_id: int) -> None:
        await self._bot.delete_message(chat_id=chat_id, message_id=message_id)

    async def send_message(self, chat_id: str, text: str) -> int:
        message = await self._bot.send_message(chat_id=chat_id, text=text)
        return message.message_id

    async def send_choice(self, chat_id: str, text: str, options: Sequence[str]) -> int:
        message = await self._bot.send_message(
            chat_id=chat_id,
            text=text,
            reply_markup=chooser_keyboard(options),
        )
        return message.message_id

    async def send_quiz(
        self, chat_id: str, question: str, options: Sequence[str], correct_index: int
    ) -> int:
        message = await self._bot.send_poll(
            chat_id=chat_id,
            question=question,
            options=list(options),
            is_anonymous=False,
            type=Poll.QUIZ,
            correct_option_id=correct_index,
        )
        return message.message_id

    async def send_poll(self, chat_id: str, question: str, options: Sequence[str]) -> int:
        message = await self._bot.send_poll(
            chat_id=chat_id,
            question=question,
            options=list(options),
            is_anonymous=False,
        )
        return message.message_id

    async def answer_selection(self, callback_id: str) -> None:
        await self._bot.answer_callback_query(callback_query_id=callback_id)


def event_from_update(update: Update | None) -> InboundEvent | None:
    """
    Convert a Telegram update into an inbound event.

    Returns:
        IncomingMessage for new messages, CallbackSelection for inline button
        presses, None for every other kind of update.
    """
    if update is None:
        return None

    if update.message is not None:
        message = update.message
        return IncomingMessage(
            chat_id=str(message.chat.id),
            message_id=message.message_id,
            sender_id=str(message.from_user.id) if message.from_user else None,
            text=message.text,
        )

    query = update.callback_query
    if query is not None and query.message is not None and query.data is not None:
        return CallbackSelection(
            chat_id=str(query.message.chat.id),
            callback_id=query.id,
            data=query.data,
            sender_id=str(query.from_user.id) if query.from_user else None,
            message_id=query.message.message_id,
        )

    return None


def parse_update(payload: dict[str, Any]) -> InboundEvent | None:
    """Decode a webhook payload into an inbound event."""
    return event_from_update(Update.de_json(payload, None))
