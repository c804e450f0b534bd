from fastapi import Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class RequestRejected(Exception):
    """A request that ends with a short plain-text error response."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ExtractionError(Exception):
    """The external model call failed."""


async def request_rejected_handler(request: Request, exc: RequestRejected) -> PlainTextResponse:
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    """Any method without a route (everything but POST and OPTIONS) gets a plain 405."""
    if exc.status_code == 405:
        return PlainTextResponse("Method not allowed", status_code=405, headers=exc.headers)
    return await http_exception_handler(request, exc)
