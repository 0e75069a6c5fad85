from pydantic import Field
from typing import List, Optional
from decimal import Decimal

from jobly.schemas.base import INT_MAX, CamelModel, RequestModel


class CompanyCreateRequest(RequestModel):
    """Schema for creating a new company"""
    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: str
    num_employees: Optional[int] = Field(None, ge=0, le=INT_MAX)
    logo_url: Optional[str] = None


class CompanyUpdateRequest(RequestModel):
    """Schema for a partial company update; the handle cannot change"""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0, le=INT_MAX)
    logo_url: Optional[str] = None


class CompanyFilter(RequestModel):
    """Search filters accepted by GET /companies"""
    min_employees: Optional[int] = Field(None, ge=0, le=INT_MAX)
    max_employees: Optional[int] = Field(None, ge=0, le=INT_MAX)
    name: Optional[str] = Field(None, min_length=1)


class CompanyJob(CamelModel):
    """A job as listed under its company"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[Decimal] = None


class CompanyResponse(CamelModel):
    """Schema for company response"""
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = None
    logo_url: Optional[str] = None


class CompanyDetailResponse(CompanyResponse):
    """Company with its jobs"""
    jobs: List[CompanyJob] = []


class CompanyOut(CamelModel):
    company: CompanyResponse


class CompanyDetailOut(CamelModel):
    company: CompanyDetailResponse


class CompanyListOut(CamelModel):
    companies: List[CompanyResponse]


class CompanyDeletedOut(CamelModel):
    deleted: str
