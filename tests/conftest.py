import random

import pytest

from trivia_app.core.models import Question
from trivia_app.core.services.identity_store import KeyValueIdentityStore
from trivia_app.core.services.leaderboard_store import KeyValueLeaderboardStore
from trivia_app.core.session_controller import SessionController
from trivia_app.core.storage import MemoryStore


class FakeLoader:
    """Question loader returning a canned set, or raising ``error`` when set."""

    def __init__(self, questions):
        self.questions = list(questions)
        self.error = None
        self.calls = []

    async def load_questions(self, count):
        self.calls.append(count)
        if self.error is not None:
            raise self.error
        return self.questions[:count]


@pytest.fixture
def questions():
    return [
        Question(
            text=f"Question {number}?",
            correct_answer=f"right {number}",
            incorrect_answers=(f"wrong {number}a", f"wrong {number}b", f"wrong {number}c"),
        )
        for number in range(10)
    ]


@pytest.fixture
def loader(questions):
    return FakeLoader(questions)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def identity_store(store):
    return KeyValueIdentityStore(store)


@pytest.fixture
def leaderboard_store(store):
    return KeyValueLeaderboardStore(store)


@pytest.fixture
def controller(loader, identity_store, leaderboard_store):
    return SessionController(
        loader=loader,
        identity_store=identity_store,
        leaderboard_store=leaderboard_store,
        rng=random.Random(7),
    )
