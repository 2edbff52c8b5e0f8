"""Dialogue-related data models.

The quiz dialogue of a chat is always in exactly one of three states. States
are immutable values: a transition replaces the state held by the
DialogueStore instead of mutating it.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Start:
    """No pending interaction."""


@dataclass(frozen=True)
class ChooseTarget:
    """Waiting for the user to pick the quoted member."""

    # ID of the chooser prompt, deleted once a member is picked
    message_id: int


@dataclass(frozen=True)
class SetQuote:
    """Waiting for the quote said by `target`."""

    # ID of the quote prompt, deleted once the quote is received
    message_id: int
    target: str


PollState = Union[Start, ChooseTarget, SetQuote]
