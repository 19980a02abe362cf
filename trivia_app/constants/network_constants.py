"""Network configuration constants for the trivia application."""

DEFAULT_HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 8000
QUESTION_API_URL: str = "https://opentdb.com/api.php"
REQUEST_TIMEOUT_SECONDS: float = 10.0
