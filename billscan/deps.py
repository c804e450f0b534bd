import base64
import binascii
import logging

from fastapi import Request
from pydantic import ValidationError

from billscan.config import Settings
from billscan.errors import RequestRejected
from billscan.extraction.base import BillExtractor
from billscan.extraction.factory import get_bill_extractor
from billscan.schemas import ExtractionRequest, ImageInput

logger = logging.getLogger("billscan")

ALLOW_METHODS = "POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, Origin"
PREFLIGHT_MAX_AGE = "86400"  # 24 hours

SHAPE_MESSAGE = "Invalid request format. Expected: { image: { base64Data: string, mimeType: string } }"

MEGABYTE = 1024 * 1024


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_extractor(request: Request) -> BillExtractor:
    """Resolve the extractor; raises ValueError when the provider is misconfigured."""
    extractor = getattr(request.app.state, "extractor", None)
    if extractor is not None:
        return extractor
    return get_bill_extractor(request.app.state.settings)


def cors_headers(origin: str) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
    }


def preflight_headers(settings: Settings, origin: str | None) -> dict[str, str]:
    allowed = settings.match_origin(origin)
    if allowed is None:
        allowed = settings.allowed_origins[0] if settings.allowed_origins else "null"
    headers = cors_headers(allowed)
    headers["Access-Control-Max-Age"] = PREFLIGHT_MAX_AGE
    return headers


def require_allowed_origin(request: Request, settings: Settings) -> str:
    origin = request.headers.get("origin")
    matched = settings.match_origin(origin)
    if matched is None:
        logger.warning("Origin rejected", extra={"extra_data": {"origin": origin}})
        raise RequestRejected(403, "Not allowed")
    return matched


def require_json(request: Request) -> None:
    content_type = request.headers.get("content-type", "")
    if "application/json" not in content_type:
        raise RequestRejected(400, "Request must be application/json")


async def read_image_input(request: Request) -> ImageInput:
    body = await request.body()
    try:
        payload = ExtractionRequest.model_validate_json(body)
    except ValidationError as e:
        logger.info("Invalid request body", extra={"extra_data": {"errors": e.error_count()}})
        raise RequestRejected(400, SHAPE_MESSAGE)

    if not payload.image.mimeType.startswith("image/"):
        raise RequestRejected(400, "File must be an image")
    return payload.image


def decode_image(image: ImageInput, max_bytes: int) -> bytes:
    data = image.base64Data
    # Tolerate data URLs (data:image/png;base64,....)
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    data = "".join(data.split())

    try:
        image_bytes = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise RequestRejected(400, "Image data must be valid base64")

    if not image_bytes:
        raise RequestRejected(400, "Image data must be valid base64")
    if len(image_bytes) > max_bytes:
        raise RequestRejected(400, f"Image too large. Maximum size is {format_size(max_bytes)}.")
    return image_bytes


def format_size(num_bytes: int) -> str:
    if num_bytes >= MEGABYTE and num_bytes % MEGABYTE == 0:
        return f"{num_bytes // MEGABYTE} MB"
    if num_bytes >= MEGABYTE:
        return f"{num_bytes / MEGABYTE:.1f} MB"
    return f"{num_bytes} bytes"
