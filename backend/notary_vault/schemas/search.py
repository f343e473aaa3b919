from enum import Enum

from pydantic import BaseModel


class DocumentField(str, Enum):
    TRANSACTION_CODE = "transaction_code"
    NOTARY_PUBLIC = "notary_public"
    SECRETARY = "secretary"
    DOCUMENT_TYPE = "document_type"


class CrossReferenceRequest(BaseModel):
    customer_ids: list[str]
