from notary_vault.models import Customer, Document, DocumentFile, PartyDocumentLink
from notary_vault.schemas.common import Page
from notary_vault.schemas.customer import CustomerResponse
from notary_vault.schemas.document import DocumentResponse
from notary_vault.schemas.document_file import DocumentFileResponse
from notary_vault.schemas.party_link import PartyLinkResponse
from notary_vault.services.party_link_service import link_sort_key


def customer_to_response(customer: Customer) -> CustomerResponse:
    return CustomerResponse(
        id=customer.id,
        full_name=customer.full_name,
        address=customer.address,
        phone=customer.phone,
        email=customer.email,
        customer_kind=customer.customer_kind,
        document_id=customer.document_id,
        passport_id=customer.passport_id,
        business_registration_number=customer.business_registration_number,
        business_name=customer.business_name,
        created_at=customer.created_at,
        updated_at=customer.updated_at,
    )


def link_to_response(link: PartyDocumentLink) -> PartyLinkResponse:
    return PartyLinkResponse(
        document_id=link.document_id,
        customer_id=link.customer_id,
        customer_name=link.customer.full_name if link.customer else None,
        transaction_code=link.document.transaction_code if link.document else None,
        party_role=link.party_role,
        signature_status=link.signature_status,
        notary_date=link.notary_date,
        created_at=link.created_at,
        updated_at=link.updated_at,
    )


def file_to_response(record: DocumentFile) -> DocumentFileResponse:
    return DocumentFileResponse(
        id=record.id,
        document_id=record.document_id,
        file_name=record.file_name,
        file_size=record.file_size,
        content_type=record.content_type,
        bucket=record.bucket,
        storage_key=record.storage_key,
        sha256_hash=record.sha256_hash,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def document_to_response(document: Document) -> DocumentResponse:
    return DocumentResponse(
        id=document.id,
        transaction_code=document.transaction_code,
        secretary=document.secretary,
        notary_public=document.notary_public,
        document_type=document.document_type,
        description=document.description,
        created_date=document.created_date,
        created_at=document.created_at,
        updated_at=document.updated_at,
        party_links=[link_to_response(l) for l in sorted(document.party_links, key=link_sort_key)],
        files=[file_to_response(f) for f in document.files],
    )


def to_page(items: list, total: int, page_number: int, page_size: int, convert) -> Page:
    return Page.build([convert(i) for i in items], total, page_number, page_size)
