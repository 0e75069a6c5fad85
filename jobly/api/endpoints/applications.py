from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import ensure_logged_in
from jobly.core.permissions import CurrentUser
from jobly.crud import application as application_crud
from jobly.schemas.application import ApplicationListOut

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.get("", response_model=ApplicationListOut)
def list_my_applications(
    current_user: CurrentUser = Depends(ensure_logged_in),
    db: Session = Depends(get_db),
):
    """
    The calling user's applications with job and company details.

    Authorization required: logged in
    """
    return {"apps": application_crud.get_for_username(db, current_user.username)}
