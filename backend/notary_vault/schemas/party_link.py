from datetime import datetime

from pydantic import BaseModel

from notary_vault.models.enums import PartyRole, SignatureStatus


class PartyInput(BaseModel):
    customer_id: str
    party_role: PartyRole
    signature_status: SignatureStatus = SignatureStatus.PENDING
    notary_date: datetime | None = None


class SignatureStatusUpdate(BaseModel):
    signature_status: SignatureStatus


class PartyLinkResponse(BaseModel):
    document_id: str
    customer_id: str
    customer_name: str | None
    transaction_code: str | None
    party_role: PartyRole
    signature_status: SignatureStatus
    notary_date: str
    created_at: str
    updated_at: str
