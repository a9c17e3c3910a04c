from slowapi import Limiter
from slowapi.util import get_remote_address

DEFAULT_SUBMIT_RATE_LIMIT = "20/minute"

# Rate limiter for write endpoints (limit by IP)
limiter = Limiter(key_func=get_remote_address)

_submit_limit = DEFAULT_SUBMIT_RATE_LIMIT


def set_submit_rate_limit(value: str) -> None:
    """Apply ServerConfig.submit_rate_limit; slowapi re-reads it on every request."""
    global _submit_limit
    _submit_limit = value or DEFAULT_SUBMIT_RATE_LIMIT


def submit_rate_limit() -> str:
    """Limit for application submissions, e.g. "20/minute"."""
    return _submit_limit
