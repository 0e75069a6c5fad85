from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import ensure_admin, query_filters
from jobly.crud import job as job_crud
from jobly.schemas.base import INT_MAX, INT_MIN
from jobly.schemas.job import (
    JobCreateRequest,
    JobDeletedOut,
    JobFilter,
    JobListOut,
    JobOut,
    JobUpdateRequest,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("", status_code=201, response_model=JobOut, dependencies=[Depends(ensure_admin)])
def create_job(request: JobCreateRequest, db: Session = Depends(get_db)):
    """
    Create a job for an existing company.

    Authorization required: admin
    """
    return {"job": job_crud.create(db, request)}


@router.get("", response_model=JobListOut)
def list_jobs(
    filters: JobFilter = Depends(query_filters(JobFilter)),
    db: Session = Depends(get_db),
):
    """
    List jobs, optionally filtered by:
    - title (case-insensitive, partial match)
    - minSalary
    - hasEquity (true: only jobs with non-zero equity; false: no filtering)
    """
    jobs = job_crud.find_all(db, filters.model_dump(by_alias=True, exclude_none=True))
    return {"jobs": jobs}


@router.get("/{job_id}", response_model=JobOut)
def get_job(
    job_id: int = Path(..., ge=INT_MIN, le=INT_MAX),
    db: Session = Depends(get_db),
):
    return {"job": job_crud.get(db, job_id)}


@router.patch("/{job_id}", response_model=JobOut, dependencies=[Depends(ensure_admin)])
def update_job(
    request: JobUpdateRequest,
    job_id: int = Path(..., ge=INT_MIN, le=INT_MAX),
    db: Session = Depends(get_db),
):
    """
    Partially update a job: title, salary, equity.

    Authorization required: admin
    """
    return {"job": job_crud.update(db, job_id, request)}


@router.delete("/{job_id}", response_model=JobDeletedOut, dependencies=[Depends(ensure_admin)])
def delete_job(
    job_id: int = Path(..., ge=INT_MIN, le=INT_MAX),
    db: Session = Depends(get_db),
):
    """Authorization required: admin"""
    job_crud.remove(db, job_id)
    return {"deleted": job_id}
