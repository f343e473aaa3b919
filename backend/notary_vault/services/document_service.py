"""
Notarized document records.

A document is created together with its party links in one transaction.
Transaction codes are unique; the unique index on ``documents`` decides, the
service only translates the violation.
"""
import logging
import uuid

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from notary_vault.errors import ConflictError, InvalidInputError, NotFoundError, StorageUnavailableError
from notary_vault.models import Customer, Document, PartyDocumentLink
from notary_vault.models.enums import PartyRole
from notary_vault.schemas.document import DocumentBase, DocumentCreate, DocumentUpdate
from notary_vault.schemas.party_link import PartyInput
from notary_vault.services.pagination import paginate
from notary_vault.services.party_link_service import build_link
from notary_vault.services.storage import ObjectStorage
from notary_vault.utils.text import LIKE_ESCAPE, contains_pattern
from notary_vault.utils.timestamps import now_iso, to_date_iso

logger = logging.getLogger("notary_vault.documents")

REQUIRED_ROLES = (PartyRole.PARTY_A, PartyRole.PARTY_B)


def newest_first(query: Query) -> Query:
    return query.order_by(Document.created_date.desc(), Document.created_at.desc(), Document.id)


def _transaction_code(data: DocumentBase) -> str:
    code = data.transaction_code.strip()
    if not code:
        raise InvalidInputError("Transaction code must not be blank.")
    return code


def _conflict_from_integrity(exc: IntegrityError, code: str) -> ConflictError:
    if "documents.transaction_code" in str(exc.orig):
        return ConflictError(f"Transaction code '{code}' already exists.")
    return ConflictError("Document violates a uniqueness constraint.")


def validate_parties(db: Session, parties: list[PartyInput]) -> None:
    if not parties:
        raise InvalidInputError("A document needs at least one party.")

    ids = [p.customer_id for p in parties]
    repeated = sorted({i for i in ids if ids.count(i) > 1})
    if repeated:
        raise InvalidInputError(f"Customer(s) listed more than once: {', '.join(repeated)}.")

    roles = {p.party_role for p in parties}
    missing_roles = [r.value for r in REQUIRED_ROLES if r not in roles]
    if missing_roles:
        raise InvalidInputError(
            f"A document needs at least one {' and one '.join(missing_roles)}."
        )

    existing = {row[0] for row in db.query(Customer.id).filter(Customer.id.in_(ids))}
    missing = [i for i in ids if i not in existing]
    if missing:
        raise InvalidInputError(
            f"Customer(s) do not exist: {', '.join(missing)}.",
            missing_customer_ids=missing,
        )


def create_document(db: Session, data: DocumentCreate) -> Document:
    code = _transaction_code(data)
    validate_parties(db, data.parties)

    now = now_iso()
    document = Document(
        id=str(uuid.uuid4()),
        transaction_code=code,
        secretary=data.secretary,
        notary_public=data.notary_public,
        document_type=data.document_type,
        description=data.description,
        created_date=to_date_iso(data.created_date),
        created_at=now,
        updated_at=now,
    )
    for party in data.parties:
        document.party_links.append(build_link(document.id, party, now))

    db.add(document)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Rejected document with transaction code %s", code)
        raise _conflict_from_integrity(exc, code) from exc
    db.refresh(document)
    logger.info("Created document %s (%s) with %d parties", document.id, code, len(data.parties))
    return document


def get_document(db: Session, document_id: str) -> Document:
    document = db.get(Document, document_id)
    if document is None:
        raise NotFoundError("Document", document_id)
    return document


def document_exists(db: Session, document_id: str) -> bool:
    return db.query(Document.id).filter(Document.id == document_id).first() is not None


def get_by_transaction_code(db: Session, transaction_code: str) -> Document:
    document = db.query(Document).filter(Document.transaction_code == transaction_code.strip()).first()
    if document is None:
        raise NotFoundError("Document", transaction_code)
    return document


def customer_documents_query(db: Session, customer_id: str) -> Query:
    query = db.query(Document).filter(
        Document.party_links.any(PartyDocumentLink.customer_id == customer_id)
    )
    return newest_first(query)


def list_documents(
    db: Session, page_number: int, page_size: int, q: str | None = None
) -> tuple[list[Document], int]:
    query = db.query(Document)
    if q:
        pattern = contains_pattern(q)
        query = query.filter(
            or_(*(
                column.ilike(pattern, escape=LIKE_ESCAPE)
                for column in (
                    Document.transaction_code,
                    Document.document_type,
                    Document.secretary,
                    Document.notary_public,
                    Document.description,
                )
            ))
        )
    return paginate(newest_first(query), page_number, page_size)


def update_document(db: Session, document_id: str, data: DocumentUpdate) -> Document:
    document = get_document(db, document_id)
    code = _transaction_code(data)

    document.transaction_code = code
    document.secretary = data.secretary
    document.notary_public = data.notary_public
    document.document_type = data.document_type
    document.description = data.description
    document.created_date = to_date_iso(data.created_date)
    document.updated_at = now_iso()

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise _conflict_from_integrity(exc, code) from exc
    db.refresh(document)
    return document


def delete_document(db: Session, storage: ObjectStorage, document_id: str) -> bool:
    """Delete a document with its links and file metadata. Missing is a no-op.

    Attached bytes are removed from storage after the commit; a failure there
    leaves orphaned objects and is only logged.
    """
    document = db.get(Document, document_id)
    if document is None:
        return False

    objects = [(f.bucket, f.storage_key) for f in document.files]
    db.delete(document)
    db.commit()
    logger.info("Deleted document %s", document_id)

    for bucket, key in objects:
        try:
            storage.delete(bucket, key)
        except StorageUnavailableError as exc:
            logger.warning("Orphaned object %s/%s after deleting document %s: %s", bucket, key, document_id, exc)
    return True
