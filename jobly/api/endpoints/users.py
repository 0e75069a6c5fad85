"""
User management and job application endpoints.

POST /users is the admin way to add users (possibly admins); people sign
themselves up through /auth/register instead.
"""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import ensure_admin, ensure_admin_or_self
from jobly.core.exceptions import UnauthorizedError
from jobly.core.permissions import CurrentUser
from jobly.core.security import create_access_token
from jobly.crud import user as user_crud
from jobly.schemas.base import INT_MAX, INT_MIN
from jobly.schemas.application import (
    AppliedOut,
    ApplicationStateUpdate,
    ApplicationUpdatedOut,
)
from jobly.schemas.user import (
    UserCreateRequest,
    UserCreatedOut,
    UserDeletedOut,
    UserDetailOut,
    UserListOut,
    UserOut,
    UserUpdateRequest,
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", status_code=201, response_model=UserCreatedOut, dependencies=[Depends(ensure_admin)])
def create_user(request: UserCreateRequest, db: Session = Depends(get_db)):
    """
    Add a user and return it with a token for them.

    Authorization required: admin
    """
    user = user_crud.register(db, request)
    token = create_access_token(user["username"], user["is_admin"])
    return {"user": user, "token": token}


@router.get("", response_model=UserListOut, dependencies=[Depends(ensure_admin)])
def list_users(db: Session = Depends(get_db)):
    """
    All users, each with the ids of the jobs they applied to.

    Authorization required: admin
    """
    return {"users": user_crud.find_all(db)}


@router.get("/{username}", response_model=UserDetailOut, dependencies=[Depends(ensure_admin_or_self)])
def get_user(username: str, db: Session = Depends(get_db)):
    """Authorization required: admin or self"""
    return {"user": user_crud.get(db, username)}


@router.patch("/{username}", response_model=UserOut)
def update_user(
    username: str,
    request: UserUpdateRequest,
    current_user: CurrentUser = Depends(ensure_admin_or_self),
    db: Session = Depends(get_db),
):
    """
    Partially update a user: firstName, lastName, password, email.

    Only admins may change isAdmin.

    Authorization required: admin or self
    """
    if "is_admin" in request.model_fields_set and not current_user.is_admin:
        raise UnauthorizedError("Only admins can change admin status")

    return {"user": user_crud.update(db, username, request)}


@router.delete("/{username}", response_model=UserDeletedOut, dependencies=[Depends(ensure_admin_or_self)])
def delete_user(username: str, db: Session = Depends(get_db)):
    """Authorization required: admin or self"""
    user_crud.remove(db, username)
    return {"deleted": username}


@router.post("/{username}/jobs/{job_id}", response_model=AppliedOut, dependencies=[Depends(ensure_admin_or_self)])
def apply_for_job(
    username: str,
    job_id: int = Path(..., ge=INT_MIN, le=INT_MAX),
    db: Session = Depends(get_db),
):
    """
    Apply the user to a job. Applying twice to the same job is a 400.

    Authorization required: admin or self
    """
    user_crud.apply_for_job(db, username, job_id)
    return {"applied": job_id}


@router.patch("/{username}/jobs/{job_id}", response_model=ApplicationUpdatedOut, dependencies=[Depends(ensure_admin_or_self)])
def update_application(
    username: str,
    request: ApplicationStateUpdate,
    job_id: int = Path(..., ge=INT_MIN, le=INT_MAX),
    db: Session = Depends(get_db),
):
    """
    Change the state of an application to interested, applied, accepted or rejected.

    Authorization required: admin or self
    """
    state = user_crud.update_application_state(db, username, job_id, request.state)
    return {"updated": state}
