"""Translation of domain errors into HTTP errors."""

from __future__ import annotations

from fastapi import HTTPException

from bdsync.core.auth.guards import LOGIN_PATH
from bdsync.core.auth.types import AuthErrorKind
from bdsync.core.exceptions import (
    AccessDeniedError,
    BdSyncError,
    IdentityProviderError,
    NotFoundError,
    NotSignedInError,
    StoreUnavailableError,
)


def to_http_exception(error: BdSyncError) -> HTTPException:
    """Map a domain error to the HTTPException a route should raise.

    Args:
        error: The domain error.

    Returns:
        HTTPException with the matching status code.
    """
    if isinstance(error, AccessDeniedError):
        return HTTPException(status_code=403, detail=str(error))
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, NotSignedInError):
        return HTTPException(status_code=401, detail=str(error), headers={"Location": LOGIN_PATH})
    if isinstance(error, StoreUnavailableError):
        return HTTPException(status_code=503, detail=str(error))
    if isinstance(error, IdentityProviderError):
        status_code = 502 if error.kind is AuthErrorKind.NETWORK else 401
        return HTTPException(
            status_code=status_code,
            detail={"code": error.code, "kind": error.kind.value, "message": error.message},
        )
    return HTTPException(status_code=500, detail=str(error))
