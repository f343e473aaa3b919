from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from notary_vault.database import get_db
from notary_vault.dependencies import get_storage
from notary_vault.routers.responses import file_to_response
from notary_vault.schemas.document_file import DocumentFileResponse, FileIntegrityResponse
from notary_vault.services import file_service
from notary_vault.services.storage import ObjectStorage

router = APIRouter(prefix="/files", tags=["files"])


@router.get("/{file_id}", response_model=DocumentFileResponse)
async def get_file(file_id: str, db: Session = Depends(get_db)):
    return file_to_response(file_service.get_file(db, file_id))


@router.get("/{file_id}/download")
async def download_file(
    file_id: str,
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    record, content = file_service.read_file_content(db, storage, file_id)
    return Response(
        content=content,
        media_type=record.content_type or "application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{record.file_name}"'},
    )


@router.get("/{file_id}/verify", response_model=FileIntegrityResponse)
async def verify_file(
    file_id: str,
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    return FileIntegrityResponse(**file_service.verify_file_integrity(db, storage, file_id))


@router.delete("/{file_id}", status_code=204)
async def delete_file(
    file_id: str,
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    file_service.delete_file(db, storage, file_id)
    return Response(status_code=204)
