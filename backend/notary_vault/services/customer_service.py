"""
Customer identity store and duplicate detection.

Natural keys (document ID, passport ID, business registration number) are
unique per column. The unique indexes in the schema are the real guard; the
duplicate lookup only exists so a caller learns *which* records collide.
"""
import logging
import uuid

from sqlalchemy import false, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from notary_vault.config import settings
from notary_vault.errors import ConflictError, InvalidInputError, NotFoundError
from notary_vault.models import Customer, PartyDocumentLink
from notary_vault.models.enums import CustomerKind, NaturalKey
from notary_vault.schemas.customer import CustomerBase, CustomerCreate, CustomerUpdate, NaturalKeys
from notary_vault.services.pagination import paginate
from notary_vault.utils.timestamps import now_iso

logger = logging.getLogger("notary_vault.customers")

NATURAL_KEY_FIELDS = [key.value for key in NaturalKey]

_CONSTRAINT_MESSAGES = {
    "customers.document_id": "A customer with this document ID already exists.",
    "customers.passport_id": "A customer with this passport ID already exists.",
    "customers.business_registration_number": (
        "A customer with this business registration number already exists."
    ),
    "customers.id": "A customer with this ID already exists.",
}


def normalize_natural_key(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    if settings.normalize_natural_keys:
        return value.strip().upper()
    return value


def natural_keys_of(data: CustomerBase | NaturalKeys) -> dict[str, str | None]:
    return {field: normalize_natural_key(getattr(data, field)) for field in NATURAL_KEY_FIELDS}


def _conflict_from_integrity(exc: IntegrityError) -> ConflictError:
    detail = str(exc.orig)
    for column, message in _CONSTRAINT_MESSAGES.items():
        if column in detail:
            return ConflictError(message)
    return ConflictError("Customer violates a uniqueness constraint.")


def _check_kind(data: CustomerBase) -> None:
    if not data.full_name.strip():
        raise InvalidInputError("Customer full name must not be blank.")
    if not settings.enforce_kind_natural_keys:
        return
    keys = natural_keys_of(data)
    if data.customer_kind == CustomerKind.INDIVIDUAL and keys["business_registration_number"]:
        raise InvalidInputError("An individual customer cannot have a business registration number.")
    if data.customer_kind == CustomerKind.BUSINESS and (keys["document_id"] or keys["passport_id"]):
        raise InvalidInputError("A business customer cannot have a document ID or passport ID.")


def find_duplicates(
    db: Session, keys: CustomerBase | NaturalKeys, exclude_id: str | None = None
) -> list[Customer]:
    """Existing customers sharing at least one non-empty natural key.

    One point lookup per populated key; a customer matching on several keys
    is returned once. No populated key means no duplicate.
    """
    found: dict[str, Customer] = {}
    for field, value in natural_keys_of(keys).items():
        if value is None:
            continue
        customer = db.query(Customer).filter(getattr(Customer, field) == value).first()
        if customer is not None and customer.id != exclude_id:
            found.setdefault(customer.id, customer)
    return list(found.values())


def _raise_if_duplicates(db: Session, data: CustomerBase, exclude_id: str | None = None) -> None:
    duplicates = find_duplicates(db, data, exclude_id=exclude_id)
    if duplicates:
        ids = [c.id for c in duplicates]
        logger.info("Rejected customer with duplicate natural keys, matches: %s", ids)
        raise ConflictError(
            "Duplicate customer: another customer has the same identity number.",
            duplicate_ids=ids,
        )


def create_customer(db: Session, data: CustomerCreate) -> Customer:
    _check_kind(data)
    _raise_if_duplicates(db, data)
    if data.id and db.get(Customer, data.id) is not None:
        raise ConflictError(_CONSTRAINT_MESSAGES["customers.id"])

    now = now_iso()
    customer = Customer(
        id=data.id or str(uuid.uuid4()),
        full_name=data.full_name.strip(),
        address=data.address,
        phone=data.phone,
        email=data.email,
        customer_kind=data.customer_kind.value,
        business_name=data.business_name,
        created_at=now,
        updated_at=now,
        **natural_keys_of(data),
    )
    db.add(customer)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise _conflict_from_integrity(exc) from exc
    db.refresh(customer)
    logger.info("Created customer %s", customer.id)
    return customer


def get_customer(db: Session, customer_id: str) -> Customer:
    customer = db.get(Customer, customer_id)
    if customer is None:
        raise NotFoundError("Customer", customer_id)
    return customer


def customer_exists(db: Session, customer_id: str) -> bool:
    return db.query(Customer.id).filter(Customer.id == customer_id).first() is not None


def get_by_natural_key(db: Session, kind: NaturalKey, value: str) -> Customer:
    normalized = normalize_natural_key(value)
    customer = None
    if normalized is not None:
        customer = db.query(Customer).filter(getattr(Customer, kind.value) == normalized).first()
    if customer is None:
        raise NotFoundError("Customer", value)
    return customer


def identity_query(db: Session, identity: str) -> Query:
    """Customers whose document ID, passport ID or registration number equals ``identity``."""
    normalized = normalize_natural_key(identity)
    query = db.query(Customer)
    if normalized is None:
        return query.filter(false())
    return query.filter(
        or_(
            Customer.document_id == normalized,
            Customer.passport_id == normalized,
            Customer.business_registration_number == normalized,
        )
    ).order_by(Customer.full_name, Customer.id)


def search_by_identity(db: Session, identity: str) -> list[Customer]:
    return identity_query(db, identity).all()


def list_customers(db: Session, page_number: int, page_size: int) -> tuple[list[Customer], int]:
    query = db.query(Customer).order_by(Customer.full_name, Customer.id)
    return paginate(query, page_number, page_size)


def update_customer(db: Session, customer_id: str, data: CustomerUpdate) -> Customer:
    customer = get_customer(db, customer_id)
    _check_kind(data)
    _raise_if_duplicates(db, data, exclude_id=customer_id)

    customer.full_name = data.full_name.strip()
    customer.address = data.address
    customer.phone = data.phone
    customer.email = data.email
    customer.customer_kind = data.customer_kind.value
    customer.business_name = data.business_name
    for field, value in natural_keys_of(data).items():
        setattr(customer, field, value)
    customer.updated_at = now_iso()

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise _conflict_from_integrity(exc) from exc
    db.refresh(customer)
    return customer


def delete_customer(db: Session, customer_id: str) -> bool:
    """Delete a customer. Missing customers are a no-op.

    A customer still linked to any document cannot be deleted.
    """
    customer = db.get(Customer, customer_id)
    if customer is None:
        return False
    link_count = (
        db.query(func.count(PartyDocumentLink.document_id))
        .filter(PartyDocumentLink.customer_id == customer_id)
        .scalar()
    )
    if link_count:
        raise ConflictError(
            f"Customer '{customer_id}' is linked to {link_count} document(s); unlink them first."
        )
    db.delete(customer)
    db.commit()
    logger.info("Deleted customer %s", customer_id)
    return True
