"""Quiz-related constants shared across the core, server and UI layers."""

QUESTION_COUNT: int = 10
QUESTION_TYPE: str = "multiple"
IDENTITY_TTL_DAYS: int = 7
USERNAME_KEY: str = "username"
SCORES_KEY: str = "scores"
STORAGE_FILE: str = "trivia_storage.json"
