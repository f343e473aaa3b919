from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from notary_vault.database import get_db
from notary_vault.dependencies import PageParams
from notary_vault.models.enums import NaturalKey
from notary_vault.routers.responses import (
    customer_to_response,
    document_to_response,
    link_to_response,
    to_page,
)
from notary_vault.schemas.common import Page
from notary_vault.schemas.customer import CustomerCreate, CustomerResponse, CustomerUpdate, NaturalKeys
from notary_vault.schemas.document import DocumentResponse
from notary_vault.schemas.party_link import PartyLinkResponse
from notary_vault.services import customer_service, party_link_service, search_service

router = APIRouter(prefix="/customers", tags=["customers"])


@router.post("", response_model=CustomerResponse, status_code=201)
async def create_customer(req: CustomerCreate, db: Session = Depends(get_db)):
    customer = customer_service.create_customer(db, req)
    return customer_to_response(customer)


@router.post("/duplicates", response_model=list[CustomerResponse])
async def detect_duplicates(req: NaturalKeys, db: Session = Depends(get_db)):
    """Existing customers sharing any identity number with the given keys."""
    return [customer_to_response(c) for c in customer_service.find_duplicates(db, req)]


@router.get("", response_model=Page[CustomerResponse])
async def list_customers(params: PageParams = Depends(), db: Session = Depends(get_db)):
    items, total = customer_service.list_customers(db, params.page_number, params.page_size)
    return to_page(items, total, params.page_number, params.page_size, customer_to_response)


@router.get("/natural-key/{kind}/{value}", response_model=CustomerResponse)
async def get_by_natural_key(kind: NaturalKey, value: str, db: Session = Depends(get_db)):
    return customer_to_response(customer_service.get_by_natural_key(db, kind, value))


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(customer_id: str, db: Session = Depends(get_db)):
    return customer_to_response(customer_service.get_customer(db, customer_id))


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(customer_id: str, req: CustomerUpdate, db: Session = Depends(get_db)):
    return customer_to_response(customer_service.update_customer(db, customer_id, req))


@router.delete("/{customer_id}", status_code=204)
async def delete_customer(customer_id: str, db: Session = Depends(get_db)):
    customer_service.delete_customer(db, customer_id)
    return Response(status_code=204)


@router.get("/{customer_id}/documents", response_model=Page[DocumentResponse])
async def customer_documents(
    customer_id: str, params: PageParams = Depends(), db: Session = Depends(get_db)
):
    customer_service.get_customer(db, customer_id)
    items, total = search_service.search_documents_by_customer(
        db, customer_id, params.page_number, params.page_size
    )
    return to_page(items, total, params.page_number, params.page_size, document_to_response)


@router.get("/{customer_id}/links", response_model=list[PartyLinkResponse])
async def customer_links(customer_id: str, db: Session = Depends(get_db)):
    customer_service.get_customer(db, customer_id)
    return [link_to_response(l) for l in party_link_service.get_links_by_customer(db, customer_id)]
