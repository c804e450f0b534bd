from billscan.config import Settings
from billscan.extraction.base import BillExtractor
from billscan.extraction.gemini_provider import GeminiBillExtractor


def get_bill_extractor(settings: Settings) -> BillExtractor:
    """Return the configured bill extraction provider."""
    if settings.provider == "gemini":
        if not settings.gemini_api_key:
            raise ValueError("GEMINI_API_KEY is not set")
        return GeminiBillExtractor(api_key=settings.gemini_api_key, model=settings.gemini_model)
    raise ValueError(f"Unknown bill provider: {settings.provider}")
