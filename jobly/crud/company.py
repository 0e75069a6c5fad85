"""
CRUD operations for companies.

Statements are plain SQL: filters and partial updates go through the
builders in jobly.core.sql and are executed with run_query.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.database import run_query
from jobly.core.exceptions import BadRequestError, NotFoundError
from jobly.core.sql import FilterField, FilterOp, sql_for_filter, sql_for_partial_update
from jobly.schemas.company import CompanyCreateRequest, CompanyUpdateRequest

logger = logging.getLogger(__name__)

COMPANY_COLUMNS = """handle,
                     name,
                     description,
                     num_employees,
                     logo_url"""

# Declared order is the order predicates appear in the WHERE clause
COMPANY_FILTERS = (
    FilterField("minEmployees", "num_employees", FilterOp.GTE),
    FilterField("maxEmployees", "num_employees", FilterOp.LTE),
    FilterField("name", "name", FilterOp.CONTAINS),
)

COMPANY_UPDATE_COLUMNS = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}


def create(db: Session, company_data: CompanyCreateRequest) -> Dict[str, Any]:
    """
    Create a company.

    Returns:
        {handle, name, description, num_employees, logo_url}

    Raises:
        BadRequestError: If the handle or name is already taken
    """
    try:
        result = run_query(
            db,
            f"""INSERT INTO companies
                    (handle, name, description, num_employees, logo_url)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING {COMPANY_COLUMNS}""",
            [
                company_data.handle,
                company_data.name,
                company_data.description,
                company_data.num_employees,
                company_data.logo_url,
            ],
        )
        company = dict(result.mappings().one())
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Rejected duplicate company {company_data.handle}")
        if _handle_taken(db, company_data.handle):
            raise BadRequestError(f"Duplicate company: {company_data.handle}")
        raise BadRequestError(f"Duplicate company name: {company_data.name}")

    logger.info(f"Created company {company['handle']}")
    return company


def find_all(db: Session, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
    """
    List companies ordered by name, optionally filtered.

    Args:
        db: Database session
        filters: Any of minEmployees, maxEmployees, name (partial, case-insensitive)

    Raises:
        BadRequestError: If minEmployees > maxEmployees
    """
    where, values = sql_for_filter(filters, COMPANY_FILTERS)
    result = run_query(
        db,
        f"""SELECT {COMPANY_COLUMNS}
            FROM companies
            {where}
            ORDER BY name""",
        values,
    )
    return [dict(row) for row in result.mappings()]


def get(db: Session, handle: str) -> Dict[str, Any]:
    """
    Get a company with its jobs.

    Returns:
        {handle, name, description, num_employees, logo_url, jobs}
        where jobs is [{id, title, salary, equity}, ...]

    Raises:
        NotFoundError: If no such company
    """
    row = run_query(
        db,
        f"""SELECT {COMPANY_COLUMNS}
            FROM companies
            WHERE handle = $1""",
        [handle],
    ).mappings().first()

    if row is None:
        raise NotFoundError(f"No company: {handle}")

    company = dict(row)
    jobs = run_query(
        db,
        """SELECT id, title, salary, equity
           FROM jobs
           WHERE company_handle = $1
           ORDER BY id""",
        [handle],
    )
    company["jobs"] = [dict(job) for job in jobs.mappings()]
    return company


def update(db: Session, handle: str, company_data: CompanyUpdateRequest) -> Dict[str, Any]:
    """
    Partial update: only the fields present in the request change.

    Raises:
        BadRequestError: If no fields were given, or the new name is taken
        NotFoundError: If no such company
    """
    set_cols, values = sql_for_partial_update(
        company_data.model_dump(exclude_unset=True, by_alias=True),
        COMPANY_UPDATE_COLUMNS,
    )
    handle_idx = len(values) + 1

    try:
        row = run_query(
            db,
            f"""UPDATE companies
                SET {set_cols}
                WHERE handle = ${handle_idx}
                RETURNING {COMPANY_COLUMNS}""",
            [*values, handle],
        ).mappings().first()
        company = dict(row) if row is not None else None
        db.commit()
    except IntegrityError:
        db.rollback()
        raise BadRequestError(f"Duplicate company name: {company_data.name}")

    if company is None:
        raise NotFoundError(f"No company: {handle}")

    return company


def remove(db: Session, handle: str) -> None:
    """
    Delete a company (its jobs go with it).

    Raises:
        NotFoundError: If no such company
    """
    row = run_query(
        db,
        """DELETE
           FROM companies
           WHERE handle = $1
           RETURNING handle""",
        [handle],
    ).first()
    db.commit()

    if row is None:
        raise NotFoundError(f"No company: {handle}")

    logger.info(f"Deleted company {handle}")


def _handle_taken(db: Session, handle: str) -> bool:
    return run_query(
        db,
        "SELECT 1 FROM companies WHERE handle = $1",
        [handle],
    ).first() is not None
