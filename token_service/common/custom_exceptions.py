from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from token_service import logger
from token_service.common.utils import build_error, json_error
from token_service.common.constants import request_id_ctx
from token_service.tokens.constants import INVALID_USER_ID
from token_service.tokens.exceptions import TokenServiceError


async def fallback_handler(request: Request, exc: Exception):

    rid = request_id_ctx.get(None)

    logger.error(
        "unexpected.exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "request_id": rid,
        },
        exc_info=exc,
    )

    return json_error(build_error("Internal Server Error"), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def token_service_exception_handler(request: Request, exc: TokenServiceError):
    rid = request_id_ctx.get(None)
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "request.failed",
        extra={
            "path": request.url.path,
            "reason": type(exc).__name__,
            "user_id": exc.user_id,
            "request_id": rid,
        },
    )
    return json_error(build_error(exc.message), status_code=exc.status_code)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    rid = request_id_ctx.get(None)
    logger.warning(
        "request.validation_failed",
        extra={
            "errors": exc.errors(),
            "path": request.url.path,
            "request_id": rid,
        },
    )
    # only the path user id is ever validated
    return json_error(build_error(INVALID_USER_ID), status_code=status.HTTP_400_BAD_REQUEST)


async def http_exception_handler(request: Request, exc: HTTPException):
    return json_error(build_error(str(exc.detail)), status_code=exc.status_code,
                      headers=getattr(exc, "headers", None))


def register_all_exceptions(app: FastAPI):

    app.add_exception_handler(
        Exception, # catch all unidentified/unhandled exceptions
        fallback_handler
    )

    app.add_exception_handler(
        TokenServiceError,
        token_service_exception_handler
    )

    app.add_exception_handler(
        RequestValidationError,
        validation_exception_handler
    )

    app.add_exception_handler(
        HTTPException,
        http_exception_handler
    )
