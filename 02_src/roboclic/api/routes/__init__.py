"""API routes."""

from . import control, telegram

__all__ = ["control", "telegram"]
