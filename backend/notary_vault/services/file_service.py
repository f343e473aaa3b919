import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from notary_vault.config import settings
from notary_vault.errors import ConflictError, InvalidInputError, NotFoundError, StorageUnavailableError
from notary_vault.models import DocumentFile
from notary_vault.services.document_service import document_exists
from notary_vault.services.storage import ObjectStorage
from notary_vault.utils.filesystem import sanitize_filename
from notary_vault.utils.hashing import hashes_match, sha256_bytes
from notary_vault.utils.timestamps import now_iso

logger = logging.getLogger("notary_vault.files")


def validate_upload(file_name: str | None, content_type: str | None, content: bytes) -> None:
    if not file_name:
        raise InvalidInputError("File name is required.")
    if content_type not in settings.allowed_content_types:
        allowed = ", ".join(settings.allowed_content_types)
        raise InvalidInputError(f"Invalid file type '{content_type}'. Allowed types: {allowed}.")
    if not content:
        raise InvalidInputError("Empty file.")
    if len(content) > settings.max_upload_bytes:
        raise InvalidInputError(f"File too large (max {settings.max_upload_bytes} bytes).")


def _discard_object(storage: ObjectStorage, bucket: str, key: str) -> None:
    """Best-effort removal of bytes whose metadata is gone or was never saved."""
    try:
        storage.delete(bucket, key)
    except StorageUnavailableError as exc:
        logger.warning("Orphaned object %s/%s: %s", bucket, key, exc)


def upload_file(
    db: Session,
    storage: ObjectStorage,
    document_id: str,
    file_name: str,
    content_type: str,
    content: bytes,
) -> DocumentFile:
    """Store bytes, then record their metadata against the document."""
    if not document_exists(db, document_id):
        raise NotFoundError("Document", document_id)
    validate_upload(file_name, content_type, content)

    file_hash = sha256_bytes(content)
    existing = db.query(DocumentFile).filter(
        DocumentFile.document_id == document_id,
        DocumentFile.sha256_hash == file_hash,
    ).first()
    if existing:
        raise ConflictError("A file with identical content is already attached to this document.")

    file_id = str(uuid.uuid4())
    bucket = settings.storage_bucket
    key = f"documents/{document_id}/{file_id}_{sanitize_filename(file_name)}"
    storage.put(bucket, key, content)

    now = now_iso()
    record = DocumentFile(
        id=file_id,
        document_id=document_id,
        file_name=file_name,
        file_size=len(content),
        content_type=content_type,
        bucket=bucket,
        storage_key=key,
        sha256_hash=file_hash,
        created_at=now,
        updated_at=now,
    )
    db.add(record)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        _discard_object(storage, bucket, key)
        raise ConflictError("File metadata violates a uniqueness constraint.") from exc
    except Exception:
        db.rollback()
        _discard_object(storage, bucket, key)
        raise
    db.refresh(record)
    logger.info("Stored file %s (%d bytes) for document %s", file_id, len(content), document_id)
    return record


def get_file(db: Session, file_id: str) -> DocumentFile:
    record = db.get(DocumentFile, file_id)
    if record is None:
        raise NotFoundError("File", file_id)
    return record


def list_files(db: Session, document_id: str) -> list[DocumentFile]:
    return (
        db.query(DocumentFile)
        .filter(DocumentFile.document_id == document_id)
        .order_by(DocumentFile.created_at.desc(), DocumentFile.id)
        .all()
    )


def read_file_content(db: Session, storage: ObjectStorage, file_id: str) -> tuple[DocumentFile, bytes]:
    record = get_file(db, file_id)
    return record, storage.get(record.bucket, record.storage_key)


def delete_file(db: Session, storage: ObjectStorage, file_id: str) -> bool:
    """Drop the metadata, then the bytes. Missing files are a no-op."""
    record = db.get(DocumentFile, file_id)
    if record is None:
        return False
    bucket, key = record.bucket, record.storage_key
    db.delete(record)
    db.commit()
    logger.info("Deleted file %s", file_id)
    _discard_object(storage, bucket, key)
    return True


def verify_file_integrity(db: Session, storage: ObjectStorage, file_id: str) -> dict:
    """Re-hash the stored bytes and compare against the recorded SHA-256."""
    record, content = read_file_content(db, storage, file_id)
    actual_hash = sha256_bytes(content)
    return {
        "verified": hashes_match(record.sha256_hash, actual_hash),
        "file_name": record.file_name,
        "stored_hash": record.sha256_hash,
        "actual_hash": actual_hash,
    }
