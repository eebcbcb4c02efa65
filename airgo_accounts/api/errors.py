"""
Domain error translation.

A single exception handler maps AccountError subclasses (and a few
specific kinds) to HTTP status codes. The body always carries the error
kind and message; neither ever contains a secret.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from airgo_accounts.domain.exceptions import (
    AccountError,
    AuthError,
    ConflictError,
    DeliveryError,
    ErrorKind,
    InputError,
    NotFoundError,
    OtpStateError,
)

_STATUS_BY_CLASS: dict[type[AccountError], int] = {
    InputError: status.HTTP_400_BAD_REQUEST,
    OtpStateError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    AuthError: status.HTTP_401_UNAUTHORIZED,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DeliveryError: status.HTTP_502_BAD_GATEWAY,
}

_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.TOKEN_MALFORMED: status.HTTP_403_FORBIDDEN,
    ErrorKind.TOKEN_EXPIRED: status.HTTP_403_FORBIDDEN,
    ErrorKind.WRONG_CURRENT_PASSWORD: status.HTTP_400_BAD_REQUEST,
}


def status_for(exc: AccountError) -> int:
    if exc.kind in _STATUS_BY_KIND:
        return _STATUS_BY_KIND[exc.kind]
    for cls in type(exc).__mro__:
        if cls in _STATUS_BY_CLASS:
            return _STATUS_BY_CLASS[cls]
    return status.HTTP_400_BAD_REQUEST


async def account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
    status_code = status_for(exc)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "kind": exc.kind.value, "field": exc.field},
        headers=headers,
    )
