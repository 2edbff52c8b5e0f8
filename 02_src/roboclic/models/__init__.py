"""Core data models for Roboclic."""

from .dialogue import ChooseTarget, PollState, SetQuote, Start
from .events import CallbackSelection, InboundEvent, IncomingMessage
from .roster import QuizDraft, RosterMember

__all__ = [
    # Roster
    "RosterMember",
    "QuizDraft",
    # Dialogue
    "PollState",
    "Start",
    "ChooseTarget",
    "SetQuote",
    # Events
    "InboundEvent",
    "IncomingMessage",
    "CallbackSelection",
]
