from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from notary_vault.database import get_db
from notary_vault.dependencies import get_signer
from notary_vault.routers.responses import document_to_response
from notary_vault.schemas.document import DocumentResponse
from notary_vault.schemas.verification import (
    BatchVerificationRequest,
    IntegrityResponse,
    PublicKeyResponse,
    SignRequest,
    SignResponse,
    VerifyResponse,
    VerifySignatureRequest,
)
from notary_vault.services import verification_service
from notary_vault.services.signing import Signer

router = APIRouter(prefix="/verification", tags=["verification"])


@router.get("/public-key", response_model=PublicKeyResponse)
async def public_key(signer: Signer = Depends(get_signer)):
    return PublicKeyResponse(algorithm=signer.algorithm, public_key=signer.public_key())


@router.get("/documents/{document_id}", response_model=DocumentResponse)
async def verification_info(document_id: str, db: Session = Depends(get_db)):
    return document_to_response(verification_service.get_verification_info(db, document_id))


@router.post("/batch", response_model=list[DocumentResponse])
async def batch_verification(req: BatchVerificationRequest, db: Session = Depends(get_db)):
    documents = verification_service.batch_verification_info(db, req.document_ids)
    return [document_to_response(d) for d in documents]


@router.post("/documents/{document_id}/sign", response_model=SignResponse)
async def sign_document(
    document_id: str,
    req: SignRequest,
    db: Session = Depends(get_db),
    signer: Signer = Depends(get_signer),
):
    signature = verification_service.sign_document_hash(
        db, signer, document_id, req.hash, customer_id=req.customer_id
    )
    return SignResponse(document_id=document_id, signature=signature)


@router.post("/documents/{document_id}/verify", response_model=VerifyResponse)
async def verify_signature(
    document_id: str,
    req: VerifySignatureRequest,
    db: Session = Depends(get_db),
    signer: Signer = Depends(get_signer),
):
    is_valid = verification_service.verify_document_signature(
        db, signer, document_id, req.hash, req.signature
    )
    return VerifyResponse(is_valid=is_valid)


@router.post("/documents/{document_id}/integrity", response_model=IntegrityResponse)
async def verify_integrity(
    document_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    """Check an uploaded copy against the document's recorded file hashes."""
    content = await file.read()
    is_valid, sha256_hash = verification_service.verify_document_integrity(db, document_id, content)
    return IntegrityResponse(is_valid=is_valid, sha256_hash=sha256_hash)
