"""Request-scoped dependencies and result-to-HTTP mapping"""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from placefinder.core.auth import AuthContext
from placefinder.core.config import Settings
from placefinder.core.results import (
    InvalidArgument,
    NotFound,
    Ok,
    Result,
    ServiceUnavailable,
    Unauthenticated,
)

STATUS_BY_FAILURE = {
    NotFound: 404,
    InvalidArgument: 400,
    Unauthenticated: 401,
    ServiceUnavailable: 503,
}


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_context(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> AuthContext:
    """Optional authentication: an absent or invalid token yields an anonymous context"""
    return request.app.state.token_verifier.context_from_header(authorization)


def require_user(auth: AuthContext = Depends(get_auth_context)) -> int:
    if not auth.is_authenticated:
        unwrap(Unauthenticated())
    return auth.user_id


def unwrap(result: Result):
    """Return the Ok value or raise the matching HTTPException"""
    if isinstance(result, Ok):
        return result.value
    status_code = STATUS_BY_FAILURE.get(type(result), 500)
    raise HTTPException(status_code=status_code, detail=result.message)
