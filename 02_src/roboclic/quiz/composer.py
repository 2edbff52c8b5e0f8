"""QuizComposer: places the quoted member among shuffled decoys."""

import random
from typing import Sequence

from ..models import QuizDraft

# Telegram polls accept at most 10 options
MAX_OPTIONS = 10

_rng = random.Random()


class QuizCompositionError(ValueError):
    """The quiz target is not part of the roster."""


def compose_quiz(
    roster: Sequence[str],
    target: str,
    max_options: int = MAX_OPTIONS,
    rng: random.Random | None = None,
) -> QuizDraft:
    """
    Build the options of a "who said it?" quiz.

    The target is removed from the roster, the remaining names are shuffled,
    and the target is put back at a random index in [0, max_options - 1).
    The list is then cut to `max_options` entries, which never drops the
    target since its index is below the cut.

    Args:
        roster: Names of all committee members, target included.
        target: Name of the member who said the quote.
        max_options: Maximum number of poll options.
        rng: Random source, the module-level one by default.

    Returns:
        QuizDraft with the options and the index of the target.

    Raises:
        QuizCompositionError: If target is not in the roster.
    """
    if target not in roster:
        raise QuizCompositionError(f"{target!r} is not a committee member")
    if max_options < 2:
        raise ValueError("a quiz needs room for at least two options")

    rng = rng or _rng

    options = [name for name in roster if name != target]
    rng.shuffle(options)
    index = rng.randrange(0, max_options - 1)
    options.insert(index, target)

    if len(options) > max_options:
        options = options[:max_options]

    # list.insert appends when index > len, report where the target landed
    return QuizDraft(options=options, correct_index=options.index(target))
