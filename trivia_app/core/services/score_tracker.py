"""Service keeping the running score of the round in progress."""

from __future__ import annotations

from trivia_app.core.models import AnswerOption


class ScoreTracker:
    """Counts correct selections. Repeated selections are not deduplicated."""

    def __init__(self) -> None:
        self._total: int = 0

    def record_selection(self, option: AnswerOption) -> None:
        if option.is_correct:
            self._total += 1

    def current_total(self) -> int:
        return self._total

    def reset(self) -> None:
        self._total = 0
