"""
Authorization checks.

Plain functions over the caller's identity; each one either returns or
raises UnauthorizedError. They never touch the database.
"""

from typing import NamedTuple, Optional

from jobly.core.exceptions import UnauthorizedError


class CurrentUser(NamedTuple):
    """Identity decoded from a bearer token."""
    username: str
    is_admin: bool = False


def require_authenticated(identity: Optional[CurrentUser]) -> CurrentUser:
    """Any logged-in user."""
    if identity is None:
        raise UnauthorizedError()
    return identity


def require_admin(identity: Optional[CurrentUser]) -> CurrentUser:
    """Logged-in admins only."""
    if identity is None or identity.is_admin is not True:
        raise UnauthorizedError()
    return identity


def require_admin_or_self(identity: Optional[CurrentUser], username: str) -> CurrentUser:
    """Admins, or the user whose resource is being accessed."""
    if identity is None:
        raise UnauthorizedError()
    if identity.is_admin is not True and identity.username != username:
        raise UnauthorizedError()
    return identity
