"""
FastAPI dependencies for authentication and authorization.

get_current_user decodes the bearer token, if any, into a CurrentUser.
A missing or invalid token is not an error at that point: the request just
continues anonymously, and the ensure_* dependencies decide whether the
route accepts that.
"""

import logging
from typing import Callable, Optional, Type

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import BaseModel, ValidationError

from jobly.core.permissions import (
    CurrentUser,
    require_admin,
    require_admin_or_self,
    require_authenticated,
)
from jobly.core.security import decode_token

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme (Authorization: Bearer <token>), optional
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[CurrentUser]:
    """
    Extract the caller's identity from the JWT, if one was sent.

    Returns None when no token is provided or the token does not verify.
    """
    if not credentials:
        return None

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        logger.debug("Ignoring invalid bearer token")
        return None

    username = payload.get("sub")
    if username is None:
        return None

    return CurrentUser(username=username, is_admin=payload.get("is_admin") is True)


def ensure_logged_in(user: Optional[CurrentUser] = Depends(get_current_user)) -> CurrentUser:
    """Require any logged-in user. Raises UnauthorizedError otherwise."""
    return require_authenticated(user)


def ensure_admin(user: Optional[CurrentUser] = Depends(get_current_user)) -> CurrentUser:
    """Require an admin. Raises UnauthorizedError otherwise."""
    return require_admin(user)


def ensure_admin_or_self(
    username: str,
    user: Optional[CurrentUser] = Depends(get_current_user),
) -> CurrentUser:
    """
    Require an admin or the user named by the ``{username}`` path parameter.

    Raises UnauthorizedError otherwise.
    """
    return require_admin_or_self(user, username)


def query_filters(model: Type[BaseModel]) -> Callable[[Request], BaseModel]:
    """
    Build a dependency that validates the whole query string against ``model``.

    Unknown parameters and bad values are reported like any other request
    validation failure (400).
    """
    def dependency(request: Request) -> BaseModel:
        try:
            return model.model_validate(dict(request.query_params))
        except ValidationError as e:
            raise RequestValidationError(e.errors())

    return dependency
