"""
Read-only search projections.

Every search is a substring (LIKE) scan over the tables, which is fine at the
size of a notary office archive. Results are newest ``created_date`` first
and paginated after filtering.
"""
from datetime import date

from sqlalchemy import false, func, or_, select
from sqlalchemy.orm import Session

from notary_vault.errors import InvalidInputError
from notary_vault.models import Customer, Document, DocumentFile, PartyDocumentLink
from notary_vault.models.enums import NaturalKey
from notary_vault.schemas.search import DocumentField
from notary_vault.services.customer_service import identity_query, normalize_natural_key
from notary_vault.services.document_service import customer_documents_query, newest_first
from notary_vault.services.pagination import paginate
from notary_vault.services.party_link_service import cross_reference_links
from notary_vault.utils.text import LIKE_ESCAPE, contains_pattern

DOCUMENT_FIELDS = {
    DocumentField.TRANSACTION_CODE: Document.transaction_code,
    DocumentField.NOTARY_PUBLIC: Document.notary_public,
    DocumentField.SECRETARY: Document.secretary,
    DocumentField.DOCUMENT_TYPE: Document.document_type,
}


def _pattern(value: str) -> str:
    value = value.strip()
    if not value:
        raise InvalidInputError("Search term must not be blank.")
    return contains_pattern(value)


def _contains(column, pattern: str):
    return column.ilike(pattern, escape=LIKE_ESCAPE)


def search_documents(db: Session, q: str, page_number: int, page_size: int) -> tuple[list[Document], int]:
    """Match document fields and, through the links, the parties' names and IDs."""
    pattern = _pattern(q)
    party_match = PartyDocumentLink.customer.has(
        or_(
            _contains(Customer.full_name, pattern),
            _contains(Customer.document_id, pattern),
            _contains(Customer.passport_id, pattern),
            _contains(Customer.business_registration_number, pattern),
        )
    )
    query = db.query(Document).filter(
        or_(
            _contains(Document.transaction_code, pattern),
            _contains(Document.secretary, pattern),
            _contains(Document.notary_public, pattern),
            _contains(Document.document_type, pattern),
            _contains(Document.description, pattern),
            Document.party_links.any(party_match),
        )
    )
    return paginate(newest_first(query), page_number, page_size)


def search_documents_by_field(
    db: Session, field: DocumentField, value: str, page_number: int, page_size: int
) -> tuple[list[Document], int]:
    query = db.query(Document).filter(_contains(DOCUMENT_FIELDS[field], _pattern(value)))
    return paginate(newest_first(query), page_number, page_size)


def search_documents_by_date_range(
    db: Session, start: date, end: date, page_number: int, page_size: int
) -> tuple[list[Document], int]:
    """Documents with a party notarized within [start, end].

    Filters on the links' ``notary_date``, not the document's ``created_date``.
    """
    if start > end:
        raise InvalidInputError("Start date must not be after end date.")
    notary_day = func.substr(PartyDocumentLink.notary_date, 1, 10)
    query = db.query(Document).filter(
        Document.party_links.any(notary_day.between(start.isoformat(), end.isoformat()))
    )
    return paginate(newest_first(query), page_number, page_size)


def search_documents_by_natural_key(
    db: Session, kind: NaturalKey, value: str, page_number: int, page_size: int
) -> tuple[list[Document], int]:
    normalized = normalize_natural_key(value)
    customer_ids = select(Customer.id)
    if normalized is None:
        customer_ids = customer_ids.where(false())
    else:
        customer_ids = customer_ids.where(getattr(Customer, kind.value) == normalized)
    query = db.query(Document).filter(
        Document.party_links.any(PartyDocumentLink.customer_id.in_(customer_ids))
    )
    return paginate(newest_first(query), page_number, page_size)


def search_documents_by_customer(
    db: Session, customer_id: str, page_number: int, page_size: int
) -> tuple[list[Document], int]:
    return paginate(customer_documents_query(db, customer_id), page_number, page_size)


def search_customers_by_identity(
    db: Session, identity: str, page_number: int, page_size: int
) -> tuple[list[Customer], int]:
    return paginate(identity_query(db, identity), page_number, page_size)


def cross_reference_documents(
    db: Session, customer_ids: list[str], page_number: int, page_size: int
) -> tuple[list[Document], int]:
    """Documents jointly involving at least two of the given customers."""
    document_ids = {link.document_id for link in cross_reference_links(db, customer_ids)}
    if not document_ids:
        return [], 0
    query = db.query(Document).filter(Document.id.in_(document_ids))
    return paginate(newest_first(query), page_number, page_size)


def search_files(
    db: Session,
    page_number: int,
    page_size: int,
    name: str | None = None,
    content_type: str | None = None,
) -> tuple[list[DocumentFile], int]:
    query = db.query(DocumentFile)
    if name:
        query = query.filter(_contains(DocumentFile.file_name, _pattern(name)))
    if content_type:
        query = query.filter(_contains(DocumentFile.content_type, _pattern(content_type)))
    query = query.order_by(DocumentFile.created_at.desc(), DocumentFile.id)
    return paginate(query, page_number, page_size)
