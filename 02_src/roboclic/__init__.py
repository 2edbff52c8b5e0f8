"""Roboclic: Telegram bot for committee quizzes with per-chat access control."""

from .access import AccessGate, AccessLevel, IAccessGate
from .app import Application, IApplication
from .commands import Command, CommandHandlers, ParsedCommand, parse_command
from .dialogue import DialogueStore, IPollDialogue, PollDialogue
from .messenger import IMessenger, TelegramMessenger
from .models import (
    CallbackSelection,
    ChooseTarget,
    InboundEvent,
    IncomingMessage,
    PollState,
    QuizDraft,
    RosterMember,
    SetQuote,
    Start,
)
from .quiz import MAX_OPTIONS, QuizCompositionError, compose_quiz
from .router import CommandRouter, ICommandRouter
from .storage import IStorage, Storage, Transaction

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Models
    "RosterMember",
    "QuizDraft",
    "PollState",
    "Start",
    "ChooseTarget",
    "SetQuote",
    "InboundEvent",
    "IncomingMessage",
    "CallbackSelection",
    # Components
    "IStorage",
    "Storage",
    "Transaction",
    "IAccessGate",
    "AccessGate",
    "AccessLevel",
    "DialogueStore",
    "IPollDialogue",
    "PollDialogue",
    "MAX_OPTIONS",
    "QuizCompositionError",
    "compose_quiz",
    "Command",
    "ParsedCommand",
    "parse_command",
    "CommandHandlers",
    "ICommandRouter",
    "CommandRouter",
    "IMessenger",
    "TelegramMessenger",
]
