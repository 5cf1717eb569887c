import os


def _env(name: str, default: str) -> str:
    return os.getenv(f"CLOCKLENSE_{name}", default)


class Config:
    # prefills the username on the load page
    load_user: str | None = _env("LOAD_USER", "") or None

    # chess.com asks API clients to identify themselves in the User-Agent
    contact_email: str = _env("CONTACT_EMAIL", "clocklense@example.com")
    request_timeout: float = float(_env("REQUEST_TIMEOUT", "20.0"))

    # moves at or below this many seconds count as premoves
    premove_threshold: float = float(_env("PREMOVE_THRESHOLD", "0.1"))

    log_level: str = _env("LOG_LEVEL", "INFO").upper()
