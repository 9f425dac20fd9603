from fastapi import Request
from fastapi.responses import JSONResponse

from outthedoor.core.logger import get_logger

logger = get_logger("exceptions")


class QuoteServiceError(Exception):
    """Base class for errors raised by the quote and contract services."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(QuoteServiceError):
    """A quote, contract or dealer record does not exist."""

    status_code = 404


class PreconditionFailedError(QuoteServiceError):
    """The record exists but is not in a state that allows the operation."""

    status_code = 409


async def quote_service_error_handler(request: Request, exc: QuoteServiceError):
    logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
