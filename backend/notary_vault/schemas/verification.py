from pydantic import BaseModel, Field


class SignRequest(BaseModel):
    hash: str = Field(..., min_length=1)
    customer_id: str | None = None


class SignResponse(BaseModel):
    document_id: str
    signature: str


class VerifySignatureRequest(BaseModel):
    hash: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1)


class VerifyResponse(BaseModel):
    is_valid: bool


class IntegrityResponse(BaseModel):
    is_valid: bool
    sha256_hash: str


class PublicKeyResponse(BaseModel):
    algorithm: str
    public_key: str


class BatchVerificationRequest(BaseModel):
    document_ids: list[str]
