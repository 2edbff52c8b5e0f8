"""Roster-related data models."""

from dataclasses import dataclass, field


@dataclass
class RosterMember:
    """A committee member a quiz can be about."""

    name: str
    poll_count: int = 0


@dataclass
class QuizDraft:
    """Options of a quiz poll and the position of the right answer."""

    options: list[str] = field(default_factory=list)
    correct_index: int = 0

    @property
    def answer(self) -> str:
        return self.options[self.correct_index]
