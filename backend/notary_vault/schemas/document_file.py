from pydantic import BaseModel


class DocumentFileResponse(BaseModel):
    id: str
    document_id: str
    file_name: str
    file_size: int
    content_type: str
    bucket: str
    storage_key: str
    sha256_hash: str
    created_at: str
    updated_at: str


class FileIntegrityResponse(BaseModel):
    verified: bool
    file_name: str
    stored_hash: str
    actual_hash: str
