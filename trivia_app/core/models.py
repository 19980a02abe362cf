"""Domain models for the trivia application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice question as delivered by the question source."""

    text: str
    correct_answer: str
    incorrect_answers: tuple[str, ...]
    category: str | None = None
    difficulty: str | None = None


@dataclass(frozen=True, slots=True)
class AnswerOption:
    """One displayable answer, annotated with whether it is the correct one."""

    label: str
    is_correct: bool


@dataclass(frozen=True, slots=True)
class ScoreEntry:
    """Leaderboard row recorded when a player submits a finished round."""

    username: str
    score: int


@dataclass(slots=True)
class IdentityRecord:
    """Persisted player name together with the moment it stops being valid."""

    username: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(slots=True)
class SessionState:
    """Everything the session controller tracks for the round in progress."""

    username: str = ""
    current_score: int = 0
    questions: list[Question] = field(default_factory=list)
    answer_options: list[list[AnswerOption]] = field(default_factory=list)
    selections: dict[int, int] = field(default_factory=dict)  # question index -> option index

    def copy(self) -> SessionState:
        return SessionState(
            username=self.username,
            current_score=self.current_score,
            questions=list(self.questions),
            answer_options=[list(options) for options in self.answer_options],
            selections=dict(self.selections),
        )
