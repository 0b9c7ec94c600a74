"""Exception handlers shared by every service app.

Usage:
    from libs.common.error_handler import add_exception_handlers

    app = FastAPI()
    add_exception_handlers(app)
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from libs.common.errors import CommerceError
from libs.common.logging import get_logger
from sqlalchemy.exc import OperationalError

logger = get_logger(__name__)

TRANSIENT_RETRY_AFTER_SECONDS = 1


async def commerce_error_handler(request: Request, exc: CommerceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )


async def transient_db_error_handler(
    request: Request, exc: OperationalError
) -> JSONResponse:
    # Timeouts, lock waits and dropped connections. The whole unit of work was
    # rolled back with the session, so the caller may retry.
    logger.warning(
        "Transient database error on %s %s: %s",
        request.method,
        request.url.path,
        exc.orig,
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"error": "temporarily_unavailable", "detail": "Please retry"},
        headers={"Retry-After": str(TRANSIENT_RETRY_AFTER_SECONDS)},
    )


def add_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CommerceError, commerce_error_handler)
    app.add_exception_handler(OperationalError, transient_db_error_handler)
