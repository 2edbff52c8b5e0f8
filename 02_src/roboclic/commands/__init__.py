"""Commands module."""

from .handlers import CommandHandlers
from .parser import Command, ParsedCommand, parse_command

__all__ = ["Command", "CommandHandlers", "ParsedCommand", "parse_command"]
