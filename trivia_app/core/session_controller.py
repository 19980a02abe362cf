"""Orchestrates one player's session: identity, question loads, scoring and submission."""

from __future__ import annotations

from enum import Enum, auto
import logging
import random

from trivia_app.constants.quiz_constants import IDENTITY_TTL_DAYS, QUESTION_COUNT
from trivia_app.core.answer_shuffler import shuffle_answers
from trivia_app.core.models import ScoreEntry, SessionState
from trivia_app.core.question_loader import QuestionLoadError, QuestionLoader
from trivia_app.core.services.identity_store import IdentityStore
from trivia_app.core.services.leaderboard_store import LeaderboardStore
from trivia_app.core.services.score_tracker import ScoreTracker

logger = logging.getLogger(__name__)


class SessionPhase(Enum):
    """Lifecycle phase of the session."""

    INITIALIZING = auto()
    LOADING = auto()
    PLAYING = auto()
    SUBMITTED = auto()
    RESETTING = auto()
    ERROR = auto()


class SessionController:
    """Owns the SessionState and drives it through the session phases.

    Every question load is tagged with a generation number. Fetch results,
    selections and submissions that carry an older generation are ignored.
    """

    def __init__(
        self,
        loader: QuestionLoader,
        identity_store: IdentityStore,
        leaderboard_store: LeaderboardStore,
        *,
        tracker: ScoreTracker | None = None,
        question_count: int = QUESTION_COUNT,
        identity_ttl_days: int = IDENTITY_TTL_DAYS,
        score_reselections: bool = False,
        rng: random.Random | None = None,
    ) -> None:
        self._loader = loader
        self._identity = identity_store
        self._leaderboard = leaderboard_store
        self._tracker = tracker or ScoreTracker()
        self._question_count = question_count
        self._identity_ttl_days = identity_ttl_days
        self._score_reselections = score_reselections
        self._rng = rng or random.Random()

        self._state = SessionState()
        self._phase = SessionPhase.INITIALIZING
        self._generation: int = 0
        self._last_error: str | None = None
        self._final_score: int | None = None

    # --- Read access ---

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def state(self) -> SessionState:
        """Snapshot of the session state; mutating it has no effect on the session."""
        return self._state.copy()

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def final_score(self) -> int | None:
        return self._final_score

    @property
    def has_identity(self) -> bool:
        return bool(self._identity.load())

    def leaderboard(self) -> list[ScoreEntry]:
        return self._leaderboard.list()

    # --- Lifecycle ---

    def start(self) -> int:
        """Begin a session: clear the leaderboard, restore identity, start loading.

        Returns the generation to pass to :meth:`fetch_questions`.
        """
        self._set_phase(SessionPhase.INITIALIZING)
        self._leaderboard.reset_all()
        self._state = SessionState(username=self._identity.load())
        self._final_score = None
        return self._begin_loading()

    def new_player(self) -> int | None:
        """Forget the current player and load a fresh question set.

        Returns the new generation, or None while a load is already running.
        """
        if self._phase is SessionPhase.LOADING:
            logger.info("Ignoring new player request while questions are loading")
            return None
        self._set_phase(SessionPhase.RESETTING)
        self._identity.clear()
        self._state = SessionState()
        self._final_score = None
        return self._begin_loading()

    async def fetch_questions(self, generation: int) -> bool:
        """Run the load for ``generation``. Returns True if the result was applied."""
        try:
            questions = await self._loader.load_questions(self._question_count)
        except QuestionLoadError as exc:
            return self._fail_load(generation, exc)
        except Exception as exc:
            return self._fail_load(generation, exc, unexpected=True)

        if generation != self._generation:
            logger.debug("Discarding %d questions from stale load %d", len(questions), generation)
            return False

        self._clear_round()
        self._state.questions = list(questions)
        self._state.answer_options = [
            shuffle_answers(question.correct_answer, question.incorrect_answers, self._rng)
            for question in questions
        ]
        self._last_error = None
        self._set_phase(SessionPhase.PLAYING)
        return True

    def select_answer(self, question_index: int, option_index: int, generation: int | None = None) -> bool:
        """Record a selection. Returns False if the selection was not accepted."""
        if self._phase is not SessionPhase.PLAYING or not self._is_current(generation):
            return False
        if not 0 <= question_index < len(self._state.answer_options):
            raise IndexError(f"Question index {question_index} out of range")
        options = self._state.answer_options[question_index]
        if not 0 <= option_index < len(options):
            raise IndexError(f"Option index {option_index} out of range")

        self._state.selections[question_index] = option_index
        if self._score_reselections:
            self._tracker.record_selection(options[option_index])
        else:
            # Score the answers currently chosen, so a changed pick replaces the earlier one.
            self._tracker.reset()
            for answered_index, chosen_index in self._state.selections.items():
                self._tracker.record_selection(self._state.answer_options[answered_index][chosen_index])
        self._state.current_score = self._tracker.current_total()
        return True

    def submit(self, username: str, generation: int | None = None) -> ScoreEntry | None:
        """Finish the round for ``username``. Returns the recorded entry, or None if ignored."""
        name = username.strip()
        if not name:
            return None
        if self._phase is not SessionPhase.PLAYING or not self._is_current(generation):
            logger.info("Ignoring submission in phase %s", self._phase.name)
            return None

        entry = ScoreEntry(username=name, score=self._tracker.current_total())
        self._identity.save(name, self._identity_ttl_days)
        self._leaderboard.append(entry)
        self._state.username = name
        self._final_score = entry.score
        self._set_phase(SessionPhase.SUBMITTED)
        logger.info("Recorded score %d for %s", entry.score, name)
        return entry

    # --- Internals ---

    def _begin_loading(self) -> int:
        self._generation += 1
        self._clear_round()
        self._last_error = None
        self._set_phase(SessionPhase.LOADING)
        return self._generation

    def _fail_load(self, generation: int, exc: Exception, unexpected: bool = False) -> bool:
        if generation != self._generation:
            logger.debug("Discarding failure from stale load %d: %s", generation, exc)
            return False
        if unexpected:
            logger.error("Question loader raised unexpectedly", exc_info=exc)
        else:
            logger.warning("Loading questions failed: %s", exc)
        self._last_error = str(exc) or type(exc).__name__
        self._clear_round()
        self._set_phase(SessionPhase.ERROR)
        return False

    def _clear_round(self) -> None:
        self._tracker.reset()
        self._state.current_score = 0
        self._state.questions = []
        self._state.answer_options = []
        self._state.selections = {}

    def _is_current(self, generation: int | None) -> bool:
        return generation is None or generation == self._generation

    def _set_phase(self, phase: SessionPhase) -> None:
        if phase is not self._phase:
            logger.info("Session phase %s -> %s", self._phase.name, phase.name)
        self._phase = phase
