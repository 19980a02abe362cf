"""Fetches question sets from the Open Trivia DB HTTP API.

Response format (``GET api.php?amount=10&type=multiple``):

    {
      "response_code": 0,
      "results": [
        {
          "category": "Science: Computers",
          "type": "multiple",
          "difficulty": "easy",
          "question": "What does CPU stand for?",
          "correct_answer": "Central Processing Unit",
          "incorrect_answers": ["Central Process Unit", "Computer Personal Unit", "Central Processor Unit"]
        }
      ]
    }

Question and answer strings arrive HTML-entity encoded (``&quot;``, ``&#039;``).
The loader keeps them verbatim; decoding belongs to whoever renders them.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx
from pydantic import BaseModel, Field, ValidationError

from trivia_app.constants.network_constants import QUESTION_API_URL, REQUEST_TIMEOUT_SECONDS
from trivia_app.constants.quiz_constants import QUESTION_TYPE
from trivia_app.core.models import Question

logger = logging.getLogger(__name__)

_RESPONSE_CODE_REASONS = {
    1: "not enough questions available for the requested amount",
    2: "the request contained an invalid parameter",
    3: "session token not found",
    4: "session token has returned every available question",
    5: "too many requests, rate limit reached",
}


class QuestionLoadError(Exception):
    """Raised when a question set cannot be obtained."""


class FetchError(QuestionLoadError):
    """Raised on network failures, non-2xx responses or API-reported failures."""


class ParseError(QuestionLoadError):
    """Raised when the response body is not the expected JSON payload."""


class QuestionLoader(Protocol):
    """Interface for anything able to produce a question set."""

    async def load_questions(self, count: int) -> list[Question]:
        ...


class _RawQuestion(BaseModel):
    question: str
    correct_answer: str
    incorrect_answers: list[str] = Field(min_length=1)
    category: str | None = None
    difficulty: str | None = None


class _TriviaPayload(BaseModel):
    response_code: int = 0
    results: list[_RawQuestion]


class OpenTriviaLoader:
    """Question loader backed by an ``httpx.AsyncClient`` request per load."""

    def __init__(
        self,
        api_url: str = QUESTION_API_URL,
        *,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        category: int | None = None,
        difficulty: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_url = api_url
        self._timeout = timeout
        self._category = category
        self._difficulty = difficulty
        self._transport = transport

    async def load_questions(self, count: int) -> list[Question]:
        if count <= 0:
            raise ValueError("Question count must be a positive integer.")

        params: dict[str, str | int] = {"amount": count, "type": QUESTION_TYPE}
        if self._category is not None:
            params["category"] = self._category
        if self._difficulty:
            params["difficulty"] = self._difficulty

        logger.debug("Requesting %d questions from %s", count, self._api_url)
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._api_url, params=params)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise FetchError(f"Question request failed: {exc}") from exc

        try:
            payload = _TriviaPayload.model_validate_json(response.content)
        except ValidationError as exc:
            raise ParseError(f"Unexpected question payload: {exc.error_count()} validation error(s)") from exc

        if payload.response_code != 0:
            reason = _RESPONSE_CODE_REASONS.get(payload.response_code, "unknown failure")
            raise FetchError(f"Question API returned code {payload.response_code}: {reason}")

        return [_to_question(raw) for raw in payload.results]


def _to_question(raw: _RawQuestion) -> Question:
    return Question(
        text=raw.question,
        correct_answer=raw.correct_answer,
        incorrect_answers=tuple(raw.incorrect_answers),
        category=raw.category,
        difficulty=raw.difficulty,
    )
