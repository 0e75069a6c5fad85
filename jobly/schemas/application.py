from pydantic import Field
from typing import List, Optional
from decimal import Decimal

from jobly.schemas.base import CamelModel, RequestModel


class ApplicationStateUpdate(RequestModel):
    """
    New state for an application.

    Kept as a plain string here; membership in ApplicationState is a business
    rule checked by the crud layer.
    """
    state: str = Field(..., min_length=1)


class ApplicationResponse(CamelModel):
    """A job the user applied to, with its company and application state"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[Decimal] = None
    company_handle: str
    company_name: str
    state: str


class ApplicationListOut(CamelModel):
    apps: List[ApplicationResponse]


class AppliedOut(CamelModel):
    applied: int


class ApplicationUpdatedOut(CamelModel):
    updated: str
