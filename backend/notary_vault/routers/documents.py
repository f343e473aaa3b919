from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session

from notary_vault.database import get_db
from notary_vault.dependencies import PageParams, get_storage
from notary_vault.routers.responses import document_to_response, file_to_response, link_to_response, to_page
from notary_vault.schemas.common import Page
from notary_vault.schemas.document import DocumentCreate, DocumentResponse, DocumentUpdate
from notary_vault.schemas.document_file import DocumentFileResponse
from notary_vault.schemas.party_link import PartyInput, PartyLinkResponse, SignatureStatusUpdate
from notary_vault.services import document_service, file_service, party_link_service
from notary_vault.services.storage import ObjectStorage

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", response_model=DocumentResponse, status_code=201)
async def create_document(req: DocumentCreate, db: Session = Depends(get_db)):
    document = document_service.create_document(db, req)
    return document_to_response(document)


@router.get("", response_model=Page[DocumentResponse])
async def list_documents(
    q: str | None = None,
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
):
    items, total = document_service.list_documents(db, params.page_number, params.page_size, q=q)
    return to_page(items, total, params.page_number, params.page_size, document_to_response)


@router.get("/transaction-code/{transaction_code}", response_model=DocumentResponse)
async def get_by_transaction_code(transaction_code: str, db: Session = Depends(get_db)):
    document = document_service.get_by_transaction_code(db, transaction_code)
    return document_to_response(document)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(document_id: str, db: Session = Depends(get_db)):
    return document_to_response(document_service.get_document(db, document_id))


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_document(document_id: str, req: DocumentUpdate, db: Session = Depends(get_db)):
    document = document_service.update_document(db, document_id, req)
    return document_to_response(document)


@router.delete("/{document_id}", status_code=204)
async def delete_document(
    document_id: str,
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    document_service.delete_document(db, storage, document_id)
    return Response(status_code=204)


# --- Parties ---

@router.get("/{document_id}/parties", response_model=list[PartyLinkResponse])
async def list_parties(document_id: str, db: Session = Depends(get_db)):
    document_service.get_document(db, document_id)
    return [link_to_response(l) for l in party_link_service.get_links_by_document(db, document_id)]


@router.post("/{document_id}/parties", response_model=PartyLinkResponse, status_code=201)
async def link_party(document_id: str, req: PartyInput, db: Session = Depends(get_db)):
    return link_to_response(party_link_service.link_party(db, document_id, req))


@router.delete("/{document_id}/parties/{customer_id}", status_code=204)
async def unlink_party(document_id: str, customer_id: str, db: Session = Depends(get_db)):
    party_link_service.unlink_party(db, document_id, customer_id)
    return Response(status_code=204)


@router.put("/{document_id}/parties/{customer_id}/signature-status", response_model=PartyLinkResponse)
async def update_signature_status(
    document_id: str, customer_id: str, req: SignatureStatusUpdate, db: Session = Depends(get_db)
):
    link = party_link_service.update_signature_status(db, document_id, customer_id, req.signature_status)
    return link_to_response(link)


# --- Files ---

@router.post("/{document_id}/files", response_model=DocumentFileResponse, status_code=201)
async def upload_file(
    document_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    content = await file.read()
    record = file_service.upload_file(
        db, storage, document_id, file.filename, file.content_type, content
    )
    return file_to_response(record)


@router.get("/{document_id}/files", response_model=list[DocumentFileResponse])
async def list_files(document_id: str, db: Session = Depends(get_db)):
    document_service.get_document(db, document_id)
    return [file_to_response(f) for f in file_service.list_files(db, document_id)]
