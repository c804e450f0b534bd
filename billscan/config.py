import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_ORIGINS = "http://localhost:5173,https://www.satyajeetnigade.in"
DEFAULT_MAX_IMAGE_BYTES = 10 * 1024 * 1024  # 10 MB


@dataclass(frozen=True)
class Settings:
    allowed_origins: tuple[str, ...]
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.0-flash"
    provider: str = "gemini"
    rate_limit: str = "30/minute"
    max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES
    sentry_dsn: str | None = None
    log_level: str = "INFO"

    def match_origin(self, origin: str | None) -> str | None:
        """Return the request origin if it contains any allowed entry."""
        if not origin:
            return None
        for allowed in self.allowed_origins:
            if allowed in origin:
                return origin
        return None


def load_settings() -> Settings:
    load_dotenv()

    origins = os.getenv("ALLOWED_ORIGINS", DEFAULT_ORIGINS).split(",")
    return Settings(
        allowed_origins=tuple(o.strip() for o in origins if o.strip()),
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
        provider=os.getenv("BILL_PROVIDER", "gemini"),
        rate_limit=os.getenv("RATE_LIMIT", "30/minute"),
        max_image_bytes=int(os.getenv("MAX_IMAGE_BYTES", str(DEFAULT_MAX_IMAGE_BYTES))),
        sentry_dsn=os.getenv("SENTRY_DSN") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
