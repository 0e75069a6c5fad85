"""
Pydantic schemas for users and authentication.

Responses never include the password hash or the admin flag.
"""

from pydantic import EmailStr, Field
from typing import List, Optional

from jobly.schemas.base import CamelModel, RequestModel


class UserRegisterRequest(RequestModel):
    """Self-registration; always creates a regular (non-admin) user."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=5, max_length=72)  # bcrypt limit
    first_name: str = Field(..., min_length=1, max_length=30)
    last_name: str = Field(..., min_length=1, max_length=30)
    email: EmailStr


class UserCreateRequest(RequestModel):
    """
    Admin-only user creation.

    The password may be omitted, in which case a random one is generated.
    """
    username: str = Field(..., min_length=1, max_length=25)
    password: Optional[str] = Field(None, min_length=5, max_length=72)
    first_name: str = Field(..., min_length=1, max_length=30)
    last_name: str = Field(..., min_length=1, max_length=30)
    email: EmailStr
    is_admin: bool = False


class UserUpdateRequest(RequestModel):
    """Partial user update. Only admins may change is_admin."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=30)
    last_name: Optional[str] = Field(None, min_length=1, max_length=30)
    password: Optional[str] = Field(None, min_length=5, max_length=72)
    email: Optional[EmailStr] = None
    is_admin: Optional[bool] = None


class UserLoginRequest(RequestModel):
    """Request schema for POST /auth/token."""
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=1)


class TokenResponse(CamelModel):
    """JWT token response."""
    token: str


class UserResponse(CamelModel):
    """User profile response (no sensitive data)."""
    username: str
    first_name: str
    last_name: str
    email: str


class UserDetailResponse(UserResponse):
    """User profile with the ids of the jobs they applied to."""
    jobs: List[int] = []


class UserOut(CamelModel):
    user: UserResponse


class UserDetailOut(CamelModel):
    user: UserDetailResponse


class UserCreatedOut(CamelModel):
    user: UserResponse
    token: str


class UserListOut(CamelModel):
    users: List[UserDetailResponse]


class UserDeletedOut(CamelModel):
    deleted: str
