"""Application entry point for TriviaQt."""

from __future__ import annotations

from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication

from trivia_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from trivia_app.constants.quiz_constants import STORAGE_FILE
from trivia_app.core.question_loader import OpenTriviaLoader
from trivia_app.core.services.identity_store import KeyValueIdentityStore
from trivia_app.core.services.leaderboard_store import KeyValueLeaderboardStore
from trivia_app.core.session_controller import SessionController
from trivia_app.core.storage import JsonFileStore
from trivia_app.server.api_server import start_api_server
from trivia_app.ui.player_window import PlayerWindow
from trivia_app.utils.logging_config import configure_logging


def build_controller(storage_path: Path) -> SessionController:
    """Wire the session controller to the Open Trivia DB and a JSON storage file."""
    store = JsonFileStore(storage_path)
    return SessionController(
        loader=OpenTriviaLoader(),
        identity_store=KeyValueIdentityStore(store),
        leaderboard_store=KeyValueLeaderboardStore(store),
    )


def main() -> None:
    """Initialize logging, start the API server, and launch the Qt UI."""
    logger = configure_logging()
    logger.info("Starting TriviaQt…")

    controller = build_controller(Path.cwd() / STORAGE_FILE)
    start_api_server(controller=controller, host=DEFAULT_HOST, port=DEFAULT_PORT)
    player_url = f"http://{DEFAULT_HOST}:{DEFAULT_PORT}/"
    logger.info("Player page available at %s", player_url)

    app = QApplication(sys.argv)
    window = PlayerWindow(player_url=player_url)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
