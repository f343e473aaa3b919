"""
Hash signing and integrity checks for notarized documents.

A signature covers ``"<document_id>:<sha256 hex>"`` so it cannot be replayed
against another document.
"""
import base64
import binascii
import logging

from sqlalchemy.orm import Session

from notary_vault.errors import InvalidInputError
from notary_vault.models import Document
from notary_vault.models.enums import SignatureStatus
from notary_vault.services.document_service import get_document, newest_first
from notary_vault.services.party_link_service import get_link, update_signature_status
from notary_vault.services.signing import Signer
from notary_vault.utils.hashing import hashes_match, sha256_bytes

logger = logging.getLogger("notary_vault.verification")


def _message(document_id: str, file_hash: str) -> bytes:
    return f"{document_id}:{file_hash.strip().lower()}".encode()


def sign_document_hash(
    db: Session, signer: Signer, document_id: str, file_hash: str, customer_id: str | None = None
) -> str:
    """Sign a document hash; with ``customer_id`` that party is marked Signed."""
    get_document(db, document_id)
    if customer_id is not None:
        get_link(db, document_id, customer_id)

    signature = base64.b64encode(signer.sign(_message(document_id, file_hash))).decode("ascii")
    if customer_id is not None:
        update_signature_status(db, document_id, customer_id, SignatureStatus.SIGNED)
    logger.info("Signed hash for document %s", document_id)
    return signature


def verify_document_signature(
    db: Session, signer: Signer, document_id: str, file_hash: str, signature: str
) -> bool:
    get_document(db, document_id)
    try:
        raw = base64.b64decode(signature, validate=True)
    except (binascii.Error, ValueError):
        return False
    return signer.verify(_message(document_id, file_hash), raw)


def verify_document_integrity(db: Session, document_id: str, content: bytes) -> tuple[bool, str]:
    """Whether ``content`` hashes to one of the document's recorded files."""
    document = get_document(db, document_id)
    actual_hash = sha256_bytes(content)
    is_valid = any(hashes_match(f.sha256_hash, actual_hash) for f in document.files)
    return is_valid, actual_hash


def get_verification_info(db: Session, document_id: str) -> Document:
    return get_document(db, document_id)


def batch_verification_info(db: Session, document_ids: list[str]) -> list[Document]:
    """Documents for the given IDs; unknown IDs are skipped."""
    if not document_ids:
        raise InvalidInputError("Document IDs are required.")
    query = db.query(Document).filter(Document.id.in_(set(document_ids)))
    return newest_first(query).all()
