"""
CRUD operations for users and their job applications.

The password column is only read by authenticate(); every other query
selects the public columns. WARNING: update() can set a new password or
grant admin rights, so callers must have checked who is asking.
"""

import logging
from collections import defaultdict
from typing import Any, Dict, List, Union
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.database import run_query
from jobly.core.exceptions import BadRequestError, NotFoundError, UnauthorizedError
from jobly.core.security import generate_password, get_password_hash, verify_password
from jobly.core.sql import sql_for_partial_update
from jobly.crud import job as job_crud
from jobly.models.application import ApplicationState
from jobly.schemas.user import UserCreateRequest, UserRegisterRequest, UserUpdateRequest

logger = logging.getLogger(__name__)

USER_COLUMNS = """username,
                  first_name,
                  last_name,
                  email,
                  is_admin"""

USER_UPDATE_COLUMNS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
}


def authenticate(db: Session, username: str, password: str) -> Dict[str, Any]:
    """
    Check a username/password pair.

    Returns:
        {username, first_name, last_name, email, is_admin}

    Raises:
        UnauthorizedError: If the user does not exist or the password is wrong
    """
    row = run_query(
        db,
        f"""SELECT {USER_COLUMNS},
                   password
            FROM users
            WHERE username = $1""",
        [username],
    ).mappings().first()

    if row is not None and verify_password(password, row["password"]):
        user = dict(row)
        del user["password"]
        return user

    logger.warning(f"Failed login for {username}")
    raise UnauthorizedError("Invalid username/password")


def register(db: Session, user_data: Union[UserRegisterRequest, UserCreateRequest]) -> Dict[str, Any]:
    """
    Create a user with a hashed password.

    Self-registration never grants admin rights; admin-created users may be
    admins and get a random password when none is supplied.

    Raises:
        BadRequestError: On a duplicate username
    """
    password = user_data.password or generate_password()
    is_admin = getattr(user_data, "is_admin", False)

    try:
        result = run_query(
            db,
            f"""INSERT INTO users
                    (username, password, first_name, last_name, email, is_admin)
                VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING {USER_COLUMNS}""",
            [
                user_data.username,
                get_password_hash(password),
                user_data.first_name,
                user_data.last_name,
                user_data.email,
                is_admin,
            ],
        )
        user = dict(result.mappings().one())
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Rejected duplicate username {user_data.username}")
        raise BadRequestError(f"Duplicate username: {user_data.username}")

    logger.info(f"Registered user {user['username']} (admin: {user['is_admin']})")
    return user


def _jobs_by_username(db: Session) -> Dict[str, List[int]]:
    result = run_query(
        db,
        """SELECT username, job_id
           FROM applications
           ORDER BY username, job_id""",
    )
    jobs = defaultdict(list)
    for username, job_id in result:
        jobs[username].append(job_id)
    return jobs


def find_all(db: Session) -> List[Dict[str, Any]]:
    """
    List all users ordered by username.

    Returns:
        [{username, first_name, last_name, email, is_admin, jobs}, ...]
        where jobs is the list of job ids the user applied to
    """
    users = [
        dict(row)
        for row in run_query(
            db,
            f"""SELECT {USER_COLUMNS}
                FROM users
                ORDER BY username""",
        ).mappings()
    ]

    jobs = _jobs_by_username(db)
    for user in users:
        user["jobs"] = jobs.get(user["username"], [])

    return users


def get(db: Session, username: str) -> Dict[str, Any]:
    """
    Get a user with the ids of the jobs they applied to.

    Raises:
        NotFoundError: If no such user
    """
    row = run_query(
        db,
        f"""SELECT {USER_COLUMNS}
            FROM users
            WHERE username = $1""",
        [username],
    ).mappings().first()

    if row is None:
        raise NotFoundError(f"No user: {username}")

    user = dict(row)
    result = run_query(
        db,
        """SELECT job_id
           FROM applications
           WHERE username = $1
           ORDER BY job_id""",
        [username],
    )
    user["jobs"] = [job_id for (job_id,) in result]
    return user


def exists(db: Session, username: str) -> bool:
    """True if a user with this username exists."""
    return run_query(db, "SELECT username FROM users WHERE username = $1", [username]).first() is not None


def update(db: Session, username: str, user_data: UserUpdateRequest) -> Dict[str, Any]:
    """
    Partial update of firstName, lastName, password, email and isAdmin.

    A supplied password is hashed before it is stored.

    Raises:
        BadRequestError: If no fields were given
        NotFoundError: If no such user
    """
    data = user_data.model_dump(exclude_unset=True, by_alias=True)
    if data.get("password"):
        data["password"] = get_password_hash(data["password"])

    set_cols, values = sql_for_partial_update(data, USER_UPDATE_COLUMNS)
    username_idx = len(values) + 1

    try:
        row = run_query(
            db,
            f"""UPDATE users
                SET {set_cols}
                WHERE username = ${username_idx}
                RETURNING {USER_COLUMNS}""",
            [*values, username],
        ).mappings().first()
        user = dict(row) if row is not None else None
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestError(f"Invalid update for user: {username}")

    if user is None:
        raise NotFoundError(f"No user: {username}")

    return user


def remove(db: Session, username: str) -> None:
    """
    Delete a user (their applications go with them).

    Raises:
        NotFoundError: If no such user
    """
    row = run_query(
        db,
        """DELETE
           FROM users
           WHERE username = $1
           RETURNING username""",
        [username],
    ).first()
    db.commit()

    if row is None:
        raise NotFoundError(f"No user: {username}")

    logger.info(f"Deleted user {username}")


def apply_for_job(db: Session, username: str, job_id: int) -> None:
    """
    Record that a user applied to a job (state "applied").

    The insert only happens when both the user and the job exist and there
    is no application for the pair yet; the checks after it only choose
    the error to report.

    Raises:
        NotFoundError: If the job or the user does not exist
        BadRequestError: If the user already applied to this job
    """
    try:
        row = run_query(
            db,
            """INSERT INTO applications (username, job_id, state)
               SELECT users.username, jobs.id, $3
               FROM users, jobs
               WHERE users.username = $1 AND jobs.id = $2
               ON CONFLICT (username, job_id) DO NOTHING
               RETURNING job_id""",
            [username, job_id, ApplicationState.APPLIED.value],
        ).first()
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestError(f"Cannot apply {username} to job {job_id}")

    if row is not None:
        logger.info(f"User {username} applied to job {job_id}")
        return

    if not job_crud.exists(db, job_id):
        raise NotFoundError(f"No job: {job_id}")
    if not exists(db, username):
        raise NotFoundError(f"No user: {username}")

    logger.warning(f"Rejected duplicate application {username} -> {job_id}")
    raise BadRequestError(f"User {username} already applied to job {job_id}")


def update_application_state(db: Session, username: str, job_id: int, state: str) -> str:
    """
    Move an existing application to a new state.

    Returns:
        The new state

    Raises:
        BadRequestError: If state is not interested/applied/accepted/rejected
        NotFoundError: If the job, the user or the application does not exist
    """
    try:
        new_state = ApplicationState(state)
    except ValueError:
        raise BadRequestError(f"Invalid state: {state}")

    row = run_query(
        db,
        """UPDATE applications
           SET state = $1
           WHERE username = $2 AND job_id = $3
           RETURNING state""",
        [new_state.value, username, job_id],
    ).first()
    db.commit()

    if row is not None:
        return row[0]

    if not job_crud.exists(db, job_id):
        raise NotFoundError(f"No job: {job_id}")
    if not exists(db, username):
        raise NotFoundError(f"No user: {username}")
    raise NotFoundError(f"No application: {username}, {job_id}")
