from slowapi import Limiter
from slowapi.util import get_remote_address

from billscan.config import Settings


def build_limiter(settings: Settings) -> Limiter:
    """One limiter (and in-memory store) per app, limiting every routed request."""
    return Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
