"""
Party-to-document links.

An edge is identified by (document_id, customer_id) and carries the party's
role, signature status and notarization date. Changing a role means unlink
then link again.
"""
import logging

from sqlalchemy import case, distinct, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from notary_vault.errors import ConflictError, InvalidInputError, NotFoundError
from notary_vault.models import Customer, Document, PartyDocumentLink
from notary_vault.models.enums import PartyRole, SignatureStatus
from notary_vault.schemas.party_link import PartyInput
from notary_vault.services.customer_service import customer_exists
from notary_vault.utils.timestamps import now_iso, to_iso

logger = logging.getLogger("notary_vault.links")

ROLE_RANK = {
    PartyRole.PARTY_A.value: 0,
    PartyRole.PARTY_B.value: 1,
    PartyRole.WITNESS.value: 2,
}

ROLE_ORDER = case(ROLE_RANK, value=PartyDocumentLink.party_role, else_=len(ROLE_RANK))


def link_sort_key(link: PartyDocumentLink) -> tuple:
    """In-memory twin of the ordering used by ``get_links_by_document``."""
    return (ROLE_RANK.get(link.party_role, len(ROLE_RANK)), link.customer.full_name, link.customer_id)


def build_link(document_id: str, party: PartyInput, now: str) -> PartyDocumentLink:
    return PartyDocumentLink(
        document_id=document_id,
        customer_id=party.customer_id,
        party_role=party.party_role.value,
        signature_status=party.signature_status.value,
        notary_date=to_iso(party.notary_date),
        created_at=now,
        updated_at=now,
    )


def get_link(db: Session, document_id: str, customer_id: str) -> PartyDocumentLink:
    link = db.get(PartyDocumentLink, (document_id, customer_id))
    if link is None:
        raise NotFoundError("Party link", f"{document_id}/{customer_id}")
    return link


def link_party(db: Session, document_id: str, party: PartyInput) -> PartyDocumentLink:
    if db.get(Document, document_id) is None:
        raise NotFoundError("Document", document_id)
    if not customer_exists(db, party.customer_id):
        raise InvalidInputError(f"Customer '{party.customer_id}' does not exist.")
    if db.get(PartyDocumentLink, (document_id, party.customer_id)) is not None:
        raise ConflictError(
            f"Customer '{party.customer_id}' is already linked to document '{document_id}'."
        )

    link = build_link(document_id, party, now_iso())
    db.add(link)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(
            f"Customer '{party.customer_id}' is already linked to document '{document_id}'."
        ) from exc
    db.refresh(link)
    logger.info("Linked customer %s to document %s as %s", party.customer_id, document_id, link.party_role)
    return link


def unlink_party(db: Session, document_id: str, customer_id: str) -> bool:
    """Remove an edge. A missing edge is a no-op."""
    link = db.get(PartyDocumentLink, (document_id, customer_id))
    if link is None:
        return False
    db.delete(link)
    db.commit()
    logger.info("Unlinked customer %s from document %s", customer_id, document_id)
    return True


def update_signature_status(
    db: Session, document_id: str, customer_id: str, status: SignatureStatus
) -> PartyDocumentLink:
    link = get_link(db, document_id, customer_id)
    link.signature_status = status.value
    link.updated_at = now_iso()
    db.commit()
    db.refresh(link)
    return link


def get_links_by_document(db: Session, document_id: str) -> list[PartyDocumentLink]:
    return (
        db.query(PartyDocumentLink)
        .join(Customer, PartyDocumentLink.customer_id == Customer.id)
        .filter(PartyDocumentLink.document_id == document_id)
        .order_by(ROLE_ORDER, Customer.full_name, Customer.id)
        .all()
    )


def get_links_by_customer(db: Session, customer_id: str) -> list[PartyDocumentLink]:
    return (
        db.query(PartyDocumentLink)
        .filter(PartyDocumentLink.customer_id == customer_id)
        .order_by(PartyDocumentLink.notary_date.desc(), ROLE_ORDER, PartyDocumentLink.document_id)
        .all()
    )


def cross_reference_links(db: Session, customer_ids: list[str]) -> list[PartyDocumentLink]:
    """Edges of documents that two or more distinct given customers share.

    Only edges of the given customers are returned, newest notary date
    first, then by transaction code.
    """
    ids = set(customer_ids)
    if len(ids) < 2:
        return []

    shared_documents = (
        select(PartyDocumentLink.document_id)
        .where(PartyDocumentLink.customer_id.in_(ids))
        .group_by(PartyDocumentLink.document_id)
        .having(func.count(distinct(PartyDocumentLink.customer_id)) > 1)
    )
    return (
        db.query(PartyDocumentLink)
        .join(Document, PartyDocumentLink.document_id == Document.id)
        .filter(
            PartyDocumentLink.document_id.in_(shared_documents),
            PartyDocumentLink.customer_id.in_(ids),
        )
        .order_by(
            PartyDocumentLink.notary_date.desc(),
            Document.transaction_code,
            PartyDocumentLink.customer_id,
        )
        .all()
    )
