"""FastAPI app initialization, exception handling"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import ResponseValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from bankcards.config import Config, get_config
from bankcards.errors.base import ApplicationError
from bankcards.routes.admin_user import admin_user_router
from bankcards.routes.card import card_router
from bankcards.routes.user import user_router
from bankcards.services.cipher import get_card_cipher

logger = logging.getLogger(__name__)

config: Config = get_config()
if not config.secret_key:
    raise ValueError(
        "BANKCARDS_SECRET_KEY is not set. Session tokens cannot be signed without it."
    )
# a key of the wrong length must stop the process here, not on the first card request
get_card_cipher(config)

app = FastAPI(title=config.app_name, version=config.app_version)


def error_response(status_code: int, error_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error_code": error_code, "error": error, **extra},
    )


@app.exception_handler(ApplicationError)
def application_exception_handler(request: Request, exc: ApplicationError):
    logger.error(
        "%s %s failed with %s: %s",
        request.method,
        request.url.path,
        exc.error_code,
        exc.error,
        # full traceback only in debug logging
        exc_info=exc if logger.isEnabledFor(logging.DEBUG) else None,
    )
    return error_response(
        exc.http_code or 418, exc.error_code, exc.error, where=exc.where
    )


@app.exception_handler(ResponseValidationError)
async def response_validation_exception_handler(
    request: Request, exc: ResponseValidationError
):
    logger.error("Response of %s does not match its schema: %s", request.url.path, exc.errors())
    return error_response(500, 1500, "Response validation error encountered")


@app.exception_handler(SQLAlchemyError)
def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, 1501, "Database error")


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception):
    # the exception text stays in the log, clients get a fixed message
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, 1000, "Internal server error")


app.include_router(user_router)
app.include_router(admin_user_router)
app.include_router(card_router)
