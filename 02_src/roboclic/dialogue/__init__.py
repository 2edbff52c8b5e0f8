"""Dialogue module."""

from .poll import IPollDialogue, PollDialogue
from .store import DialogueStore

__all__ = ["DialogueStore", "IPollDialogue", "PollDialogue"]
