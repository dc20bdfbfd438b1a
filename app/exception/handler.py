from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.exception.exception import FetchError
from app.model.response import ErrorResponse
from utils import traceroot_wrapper as traceroot

logger = traceroot.get_logger("exception_handler")


def error_response(message: str, status_code: int = 500) -> JSONResponse:
    body = ErrorResponse(error=message, timestamp=datetime.now(timezone.utc))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))


async def fetch_error_handler(request: Request, exc: FetchError):
    logger.error(f"Error in {request.url.path} endpoint: {exc.message}", extra={"path": request.url.path})
    return error_response(exc.message)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error", extra={"path": request.url.path, "error": str(exc)}, exc_info=exc)
    return error_response("Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FetchError, fetch_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
