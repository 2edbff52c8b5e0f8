"""Messenger module."""

from .messenger import (
    IMessenger,
    TelegramMessenger,
    chooser_keyboard,
    event_from_update,
    parse_update,
)

__all__ = [
    "IMessenger",
    "TelegramMessenger",
    "chooser_keyboard",
    "event_from_update",
    "parse_update",
]
