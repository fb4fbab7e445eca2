from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from app.core.logging import get_logger

logger = get_logger(__name__)


class InventoryError(Exception):
    """Base error for product operations, carries the HTTP status it maps to."""

    status_code = 500
    default_message = "Server Error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def public_message(self) -> str:
        return self.message


class ValidationError(InventoryError):
    """Required input is missing or malformed."""

    status_code = 400
    default_message = "Invalid request"


class NotFoundError(InventoryError):
    """Referenced product does not exist."""

    status_code = 404
    default_message = "Product not found"


class GenerationError(InventoryError):
    """Remote text generation failed or returned nothing usable.

    The message is passed through to the caller verbatim.
    """

    status_code = 500
    default_message = "Failed to generate description from AI Replicate."


class StoreError(InventoryError):
    """Unexpected persistence failure. Detail stays in the logs."""

    status_code = 500

    def public_message(self) -> str:
        return self.default_message


async def inventory_error_handler(request: Request, exc: InventoryError):
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
            error=exc.message,
            cause=repr(exc.__cause__) if exc.__cause__ else None,
        )
    else:
        logger.info(
            "Request rejected",
            path=request.url.path,
            method=request.method,
            status_code=exc.status_code,
            error=exc.message,
        )

    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message()})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        details.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))

    return await inventory_error_handler(request, ValidationError("; ".join(details) or None))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InventoryError, inventory_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
