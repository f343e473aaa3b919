from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from notary_vault.database import get_db
from notary_vault.dependencies import PageParams
from notary_vault.models.enums import NaturalKey
from notary_vault.routers.responses import customer_to_response, document_to_response, file_to_response, to_page
from notary_vault.schemas.common import Page
from notary_vault.schemas.customer import CustomerResponse
from notary_vault.schemas.document import DocumentResponse
from notary_vault.schemas.document_file import DocumentFileResponse
from notary_vault.schemas.search import CrossReferenceRequest, DocumentField
from notary_vault.services import customer_service, search_service

router = APIRouter(prefix="/search", tags=["search"])


def _document_page(result, params: PageParams) -> Page:
    items, total = result
    return to_page(items, total, params.page_number, params.page_size, document_to_response)


@router.get("/documents", response_model=Page[DocumentResponse])
async def search_documents(
    q: str = Query(..., min_length=1),
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
):
    return _document_page(
        search_service.search_documents(db, q, params.page_number, params.page_size), params
    )


@router.get("/documents/field/{field}", response_model=Page[DocumentResponse])
async def search_documents_by_field(
    field: DocumentField,
    value: str = Query(..., min_length=1),
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
):
    return _document_page(
        search_service.search_documents_by_field(db, field, value, params.page_number, params.page_size),
        params,
    )


@router.get("/documents/date-range", response_model=Page[DocumentResponse])
async def search_documents_by_date_range(
    start: date,
    end: date,
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
):
    """Documents with a party notarized between ``start`` and ``end`` inclusive."""
    return _document_page(
        search_service.search_documents_by_date_range(db, start, end, params.page_number, params.page_size),
        params,
    )


@router.get("/documents/natural-key/{kind}/{value}", response_model=Page[DocumentResponse])
async def search_documents_by_natural_key(
    kind: NaturalKey,
    value: str,
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
):
    return _document_page(
        search_service.search_documents_by_natural_key(db, kind, value, params.page_number, params.page_size),
        params,
    )


@router.get("/documents/customer/{customer_id}", response_model=Page[DocumentResponse])
async def search_documents_by_customer(
    customer_id: str,
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
):
    customer_service.get_customer(db, customer_id)
    return _document_page(
        search_service.search_documents_by_customer(db, customer_id, params.page_number, params.page_size),
        params,
    )


@router.post("/cross-reference", response_model=Page[DocumentResponse])
async def cross_reference(
    req: CrossReferenceRequest,
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
):
    """Documents shared by at least two of the given customers."""
    return _document_page(
        search_service.cross_reference_documents(db, req.customer_ids, params.page_number, params.page_size),
        params,
    )


@router.get("/customers", response_model=Page[CustomerResponse])
async def search_customers(
    identity: str = Query(..., min_length=1),
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
):
    items, total = search_service.search_customers_by_identity(
        db, identity, params.page_number, params.page_size
    )
    return to_page(items, total, params.page_number, params.page_size, customer_to_response)


@router.get("/files", response_model=Page[DocumentFileResponse])
async def search_files(
    name: str | None = None,
    content_type: str | None = None,
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
):
    items, total = search_service.search_files(
        db, params.page_number, params.page_size, name=name, content_type=content_type
    )
    return to_page(items, total, params.page_number, params.page_size, file_to_response)
