from datetime import date

from pydantic import BaseModel, Field

from notary_vault.schemas.document_file import DocumentFileResponse
from notary_vault.schemas.party_link import PartyInput, PartyLinkResponse


class DocumentBase(BaseModel):
    transaction_code: str = Field(..., min_length=1)
    secretary: str | None = None
    notary_public: str | None = None
    document_type: str | None = None
    description: str | None = None
    created_date: date


class DocumentCreate(DocumentBase):
    parties: list[PartyInput] = Field(..., min_length=1)


class DocumentUpdate(DocumentBase):
    """Full replacement of every mutable field; parties are managed separately."""


class DocumentResponse(BaseModel):
    id: str
    transaction_code: str
    secretary: str | None
    notary_public: str | None
    document_type: str | None
    description: str | None
    created_date: str
    created_at: str
    updated_at: str
    party_links: list[PartyLinkResponse] = []
    files: list[DocumentFileResponse] = []
