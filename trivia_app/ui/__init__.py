"""Qt UI components for the trivia player."""

from .player_window import PlayerWindow

__all__ = ["PlayerWindow"]
