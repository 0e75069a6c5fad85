"""
Read side of job applications: the jobs a user applied to.
"""

from typing import Any, Dict, List
from sqlalchemy.orm import Session

from jobly.core.database import run_query
from jobly.core.exceptions import NotFoundError
from jobly.crud import user as user_crud


def get_for_username(db: Session, username: str) -> List[Dict[str, Any]]:
    """
    List a user's applications with job and company details.

    Returns:
        [{id, title, salary, equity, company_handle, company_name, state}, ...]
        ordered by job id

    Raises:
        NotFoundError: If no such user
    """
    if not user_crud.exists(db, username):
        raise NotFoundError(f"No user: {username}")

    result = run_query(
        db,
        """SELECT jobs.id,
                  jobs.title,
                  jobs.salary,
                  jobs.equity,
                  companies.handle AS company_handle,
                  companies.name AS company_name,
                  applications.state
           FROM applications
               JOIN jobs ON jobs.id = applications.job_id
               JOIN companies ON companies.handle = jobs.company_handle
           WHERE applications.username = $1
           ORDER BY jobs.id""",
        [username],
    )
    return [dict(row) for row in result.mappings()]
