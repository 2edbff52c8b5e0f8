"""Inbound events handled by the CommandRouter."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class IncomingMessage:
    """A message posted in a chat."""

    chat_id: str
    message_id: int
    sender_id: str | None = None  # None for anonymous / channel posts
    text: str | None = None


@dataclass(frozen=True)
class CallbackSelection:
    """A press on an inline keyboard button."""

    chat_id: str
    callback_id: str
    data: str
    sender_id: str | None = None
    message_id: int | None = None  # message carrying the keyboard


InboundEvent = Union[IncomingMessage, CallbackSelection]
