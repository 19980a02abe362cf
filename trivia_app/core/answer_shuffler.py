"""Answer shuffling for multiple-choice questions."""

from __future__ import annotations

import random
from typing import Sequence

from trivia_app.core.models import AnswerOption

_default_rng = random.Random()


def shuffle_answers(
    correct_answer: str,
    incorrect_answers: Sequence[str],
    rng: random.Random | None = None,
) -> list[AnswerOption]:
    """Return every answer in random order, flagging the correct one(s).

    Correctness is decided by value, so an "incorrect" answer that repeats the
    correct text is flagged as correct too.
    """
    if not incorrect_answers:
        raise ValueError("A question needs at least one incorrect answer.")

    labels = [correct_answer, *incorrect_answers]
    (rng or _default_rng).shuffle(labels)
    return [AnswerOption(label=label, is_correct=label == correct_answer) for label in labels]
