from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import ensure_admin, query_filters
from jobly.crud import company as company_crud
from jobly.schemas.company import (
    CompanyCreateRequest,
    CompanyDeletedOut,
    CompanyDetailOut,
    CompanyFilter,
    CompanyListOut,
    CompanyOut,
    CompanyUpdateRequest,
)

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("", status_code=201, response_model=CompanyOut, dependencies=[Depends(ensure_admin)])
def create_company(request: CompanyCreateRequest, db: Session = Depends(get_db)):
    """
    Create a company.

    Authorization required: admin
    """
    return {"company": company_crud.create(db, request)}


@router.get("", response_model=CompanyListOut)
def list_companies(
    filters: CompanyFilter = Depends(query_filters(CompanyFilter)),
    db: Session = Depends(get_db),
):
    """
    List companies, optionally filtered by:
    - minEmployees
    - maxEmployees
    - name (case-insensitive, partial match)

    minEmployees greater than maxEmployees is a 400.
    """
    companies = company_crud.find_all(db, filters.model_dump(by_alias=True, exclude_none=True))
    return {"companies": companies}


@router.get("/{handle}", response_model=CompanyDetailOut)
def get_company(handle: str, db: Session = Depends(get_db)):
    """Company details including its jobs [{id, title, salary, equity}, ...]."""
    return {"company": company_crud.get(db, handle)}


@router.patch("/{handle}", response_model=CompanyOut, dependencies=[Depends(ensure_admin)])
def update_company(handle: str, request: CompanyUpdateRequest, db: Session = Depends(get_db)):
    """
    Partially update a company: name, description, numEmployees, logoUrl.

    Authorization required: admin
    """
    return {"company": company_crud.update(db, handle, request)}


@router.delete("/{handle}", response_model=CompanyDeletedOut, dependencies=[Depends(ensure_admin)])
def delete_company(handle: str, db: Session = Depends(get_db)):
    """Authorization required: admin"""
    company_crud.remove(db, handle)
    return {"deleted": handle}
