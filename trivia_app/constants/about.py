"""Static metadata describing TriviaQt."""

APP_NAME = "TriviaQt"
APP_VERSION = "0.1"
APP_ABOUT_TEXT = (
    "TriviaQt is a small trivia game built with Qt and FastAPI. "
    "It pulls ten multiple-choice questions from Open Trivia DB, keeps score while you answer, "
    "and lists every finished round on a per-session leaderboard."
)
