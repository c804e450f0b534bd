import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from billscan.config import Settings
from billscan.deps import (
    cors_headers,
    decode_image,
    get_extractor,
    get_settings,
    preflight_headers,
    read_image_input,
    require_allowed_origin,
    require_json,
)
from billscan.errors import ExtractionError, RequestRejected
from billscan.extraction.normalizer import normalize_response

logger = logging.getLogger("billscan")
router = APIRouter()

# Only POST and OPTIONS are routed; other methods get 405 from
# errors.method_not_allowed_handler
ANY_PATH = "/{path:path}"


@router.options(ANY_PATH)
def preflight(request: Request, settings: Settings = Depends(get_settings)):
    headers = preflight_headers(settings, request.headers.get("origin"))
    return Response(status_code=204, headers=headers)


@router.post(ANY_PATH)
async def extract_bill(request: Request, settings: Settings = Depends(get_settings)):
    origin = require_allowed_origin(request, settings)
    require_json(request)
    image = await read_image_input(request)
    image_bytes = decode_image(image, settings.max_image_bytes)

    try:
        extractor = get_extractor(request)
    except ValueError as e:
        logger.error(f"Bill extraction config error: {e}")
        raise RequestRejected(503, "Bill scanning is not available")

    try:
        reply = await extractor.generate(image_bytes, image.mimeType)
    except ExtractionError as e:
        logger.error(f"Error processing request: {e}")
        raise RequestRejected(500, f"Error processing request: {e}")

    return Response(
        content=normalize_response(reply),
        media_type="application/json",
        headers=cors_headers(origin),
    )
