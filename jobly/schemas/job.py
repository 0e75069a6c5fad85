from pydantic import Field
from typing import List, Optional
from decimal import Decimal

from jobly.schemas.base import INT_MAX, CamelModel, RequestModel


class JobCreateRequest(RequestModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0, le=INT_MAX)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)
    company_handle: str = Field(..., min_length=1, max_length=25)


class JobUpdateRequest(RequestModel):
    """
    Schema for a partial job update.

    Neither the id nor the company of a job can change.
    """
    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0, le=INT_MAX)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)


class JobFilter(RequestModel):
    """
    Search filters accepted by GET /jobs.

    has_equity=True keeps only jobs with non-zero equity; False applies no filter.
    """
    title: Optional[str] = Field(None, min_length=1)
    min_salary: Optional[int] = Field(None, ge=0, le=INT_MAX)
    has_equity: Optional[bool] = None


class JobResponse(CamelModel):
    """Schema for job response"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[Decimal] = None
    company_handle: str


class JobOut(CamelModel):
    job: JobResponse


class JobListOut(CamelModel):
    jobs: List[JobResponse]


class JobDeletedOut(CamelModel):
    deleted: int
