# src/social_publisher/errors.py
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import structlog

logger = structlog.get_logger(__name__)


class SocialPublisherError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SocialPublisherError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(SocialPublisherError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(SocialPublisherError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(SocialPublisherError):
    status_code = status.HTTP_409_CONFLICT


async def social_publisher_exception_handler(request: Request, exc: SocialPublisherError):
    if exc.status_code >= 500:
        logger.error("request_failed", error=exc.message, error_type=exc.__class__.__name__)
    else:
        logger.info("request_rejected", error=exc.message, error_type=exc.__class__.__name__, status_code=exc.status_code)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # schema violations are reported as 400 like the hand-written checks
    logger.info("request_validation_failed", errors=len(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("database_error", error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc) or "Internal server error"},
    )


async def unexpected_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error", error=str(exc), error_type=exc.__class__.__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc) or "Internal server error"},
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(SocialPublisherError, social_publisher_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, unexpected_exception_handler)
