"""Qt UI constants used by the player window."""

WINDOW_TITLE: str = "TriviaQt"
WINDOW_WIDTH: int = 900
WINDOW_HEIGHT: int = 760
PLAYER_URL_TEMPLATE: str = "Playing at {url}"
