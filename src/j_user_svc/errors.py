"""
Error types raised by the service layers and the single place where they, and
SQLAlchemy errors, are turned into HTTP responses.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError

from j_user_svc.validation import ValidationFailed, format_errors


class InvalidCredentials(Exception):
    """Unknown email or wrong password at login. The two cases are not distinguished."""


class AuthenticationRequired(Exception):
    """Missing, malformed, forged or expired bearer token."""


def _detail(status_code: int, detail: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail}, headers=headers)


async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "errors": exc.errors},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await validation_failed_handler(request, ValidationFailed(format_errors(exc.errors())))


async def invalid_credentials_handler(request: Request, exc: InvalidCredentials) -> JSONResponse:
    return _detail(status.HTTP_401_UNAUTHORIZED, "Invalid credentials")


async def authentication_required_handler(request: Request, exc: AuthenticationRequired) -> JSONResponse:
    return _detail(
        status.HTTP_401_UNAUTHORIZED,
        "Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


def is_unique_violation(exc: IntegrityError) -> bool:
    """
    True when the driver reports a unique constraint failure. PostgreSQL drivers
    expose SQLSTATE 23505; SQLite and MySQL only say so in the message.
    """
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return code == "23505"
    message = str(orig).lower()
    return "unique" in message or "duplicate" in message


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    if not is_unique_violation(exc):
        return await database_error_handler(request, exc)
    logging.info("Unique constraint violated on %s %s", request.method, request.url.path)
    return _detail(status.HTTP_409_CONFLICT, "User already exists")


async def no_result_handler(request: Request, exc: NoResultFound) -> JSONResponse:
    return _detail(status.HTTP_404_NOT_FOUND, "User not found")


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logging.error(exc, exc_info=True)
    return _detail(status.HTTP_400_BAD_REQUEST, "Database error")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Install the handlers on the application.

    Starlette resolves handlers by walking the exception's MRO, so the
    IntegrityError and NoResultFound handlers take precedence over the generic
    SQLAlchemyError fallback.
    """
    app.add_exception_handler(ValidationFailed, validation_failed_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(InvalidCredentials, invalid_credentials_handler)
    app.add_exception_handler(AuthenticationRequired, authentication_required_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(NoResultFound, no_result_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
