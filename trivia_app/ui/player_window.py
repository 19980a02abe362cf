"""Qt main window hosting the player page."""

from __future__ import annotations

from PySide6.QtCore import QUrl
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import QLabel, QMainWindow, QVBoxLayout, QWidget

from trivia_app.constants.ui_constants import (
    PLAYER_URL_TEMPLATE,
    WINDOW_HEIGHT,
    WINDOW_TITLE,
    WINDOW_WIDTH,
)


class PlayerWindow(QMainWindow):
    """Desktop shell around the browser-based game served by the API server."""

    def __init__(self, player_url: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(WINDOW_WIDTH, WINDOW_HEIGHT)
        self.player_url = player_url

        self._build_ui()

    def _build_ui(self) -> None:
        container = QWidget(self)
        layout = QVBoxLayout()
        container.setLayout(layout)

        self.url_label = QLabel(PLAYER_URL_TEMPLATE.format(url=self.player_url), container)
        self.url_label.setWordWrap(True)
        layout.addWidget(self.url_label)

        self.player_view = QWebEngineView(container)
        self.player_view.setUrl(QUrl(self.player_url))
        layout.addWidget(self.player_view, stretch=1)

        self.setCentralWidget(container)
