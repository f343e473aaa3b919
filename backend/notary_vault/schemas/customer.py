from pydantic import BaseModel, Field

from notary_vault.models.enums import CustomerKind


class CustomerBase(BaseModel):
    full_name: str = Field(..., min_length=1)
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    customer_kind: CustomerKind = CustomerKind.INDIVIDUAL
    document_id: str | None = None
    passport_id: str | None = None
    business_registration_number: str | None = None
    business_name: str | None = None


class CustomerCreate(CustomerBase):
    id: str | None = None


class CustomerUpdate(CustomerBase):
    """Full replacement of every mutable field."""


class NaturalKeys(BaseModel):
    document_id: str | None = None
    passport_id: str | None = None
    business_registration_number: str | None = None


class CustomerResponse(BaseModel):
    id: str
    full_name: str
    address: str | None
    phone: str | None
    email: str | None
    customer_kind: CustomerKind
    document_id: str | None
    passport_id: str | None
    business_registration_number: str | None
    business_name: str | None
    created_at: str
    updated_at: str
