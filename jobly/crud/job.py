"""
CRUD operations for jobs.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.database import run_query
from jobly.core.exceptions import BadRequestError, NotFoundError
from jobly.core.sql import FilterField, FilterOp, sql_for_filter, sql_for_partial_update
from jobly.schemas.job import JobCreateRequest, JobUpdateRequest

logger = logging.getLogger(__name__)

JOB_COLUMNS = """id,
                 title,
                 salary,
                 equity,
                 company_handle"""

JOB_FILTERS = (
    FilterField("title", "title", FilterOp.CONTAINS),
    FilterField("minSalary", "salary", FilterOp.GTE),
    FilterField("hasEquity", "equity", FilterOp.POSITIVE),
)


def create(db: Session, job_data: JobCreateRequest) -> Dict[str, Any]:
    """
    Create a job.

    Returns:
        {id, title, salary, equity, company_handle}

    Raises:
        BadRequestError: If the company does not exist
    """
    try:
        result = run_query(
            db,
            f"""INSERT INTO jobs (title, salary, equity, company_handle)
                VALUES ($1, $2, $3, $4)
                RETURNING {JOB_COLUMNS}""",
            [job_data.title, job_data.salary, job_data.equity, job_data.company_handle],
        )
        job = dict(result.mappings().one())
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Rejected job for unknown company {job_data.company_handle}")
        raise BadRequestError(f"No company: {job_data.company_handle}")

    logger.info(f"Created job {job['id']}: {job['title']}")
    return job


def find_all(db: Session, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    List jobs ordered by title, optionally filtered.

    Args:
        db: Database session
        filters: Any of title (partial, case-insensitive), minSalary, hasEquity
    """
    where, values = sql_for_filter(filters, JOB_FILTERS)
    result = run_query(
        db,
        f"""SELECT {JOB_COLUMNS}
            FROM jobs
            {where}
            ORDER BY title, id""",
        values,
    )
    return [dict(row) for row in result.mappings()]


def get(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Get a job by id.

    Raises:
        NotFoundError: If no such job
    """
    row = run_query(
        db,
        f"""SELECT {JOB_COLUMNS}
            FROM jobs
            WHERE id = $1""",
        [job_id],
    ).mappings().first()

    if row is None:
        raise NotFoundError(f"No job: {job_id}")

    return dict(row)


def exists(db: Session, job_id: int) -> bool:
    """True if a job with this id exists."""
    return run_query(db, "SELECT id FROM jobs WHERE id = $1", [job_id]).first() is not None


def update(db: Session, job_id: int, job_data: JobUpdateRequest) -> Dict[str, Any]:
    """
    Partial update of title, salary and equity.

    Raises:
        BadRequestError: If no fields were given
        NotFoundError: If no such job
    """
    set_cols, values = sql_for_partial_update(
        job_data.model_dump(exclude_unset=True, by_alias=True)
    )
    id_idx = len(values) + 1

    try:
        row = run_query(
            db,
            f"""UPDATE jobs
                SET {set_cols}
                WHERE id = ${id_idx}
                RETURNING {JOB_COLUMNS}""",
            [*values, job_id],
        ).mappings().first()
        job = dict(row) if row is not None else None
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestError(f"Invalid update for job: {job_id}")

    if job is None:
        raise NotFoundError(f"No job: {job_id}")

    return job


def remove(db: Session, job_id: int) -> None:
    """
    Delete a job.

    Raises:
        NotFoundError: If no such job
    """
    row = run_query(
        db,
        """DELETE
           FROM jobs
           WHERE id = $1
           RETURNING id""",
        [job_id],
    ).first()
    db.commit()

    if row is None:
        raise NotFoundError(f"No job: {job_id}")

    logger.info(f"Deleted job {job_id}")
