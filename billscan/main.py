import sentry_sdk
from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from billscan.config import Settings, load_settings
from billscan.errors import RequestRejected, method_not_allowed_handler, request_rejected_handler
from billscan.extraction.base import BillExtractor
from billscan.logging_config import setup_logging
from billscan.middleware import RequestLoggingMiddleware
from billscan.ratelimit import build_limiter
from billscan.routes import extract


def create_app(settings: Settings | None = None, extractor: BillExtractor | None = None) -> FastAPI:
    """Build the gateway; extractor overrides the provider chosen from settings."""
    if settings is None:
        settings = load_settings()

    logger = setup_logging(settings.log_level)

    # Sentry
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            traces_sample_rate=0.1,
            send_default_pii=False,
        )

    # No /docs: every path belongs to the extraction routes
    app = FastAPI(title="Bill Extraction Gateway", version="0.1.0", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.settings = settings
    app.state.extractor = extractor

    app.state.limiter = build_limiter(settings)
    # Preflights do not count against the limit
    app.state.limiter.exempt(extract.preflight)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(RequestRejected, request_rejected_handler)
    app.add_exception_handler(StarletteHTTPException, method_not_allowed_handler)

    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(extract.router)

    logger.info(
        "Bill extraction gateway configured",
        extra={"extra_data": {
            "allowed_origins": list(settings.allowed_origins),
            "provider": settings.provider,
            "model": settings.gemini_model,
        }},
    )
    return app


app = create_app()
