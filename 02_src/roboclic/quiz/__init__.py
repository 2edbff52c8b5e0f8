"""Quiz module."""

from .composer import MAX_OPTIONS, QuizCompositionError, compose_quiz

__all__ = ["MAX_OPTIONS", "QuizCompositionError", "compose_quiz"]
