from fastapi import Query

from notary_vault.config import settings
from notary_vault.services.signing import HmacSigner, Signer
from notary_vault.services.storage import LocalObjectStorage, ObjectStorage


def get_storage() -> ObjectStorage:
    return LocalObjectStorage(settings.storage_path)


def get_signer() -> Signer:
    return HmacSigner(settings.signing_key)


class PageParams:
    def __init__(
        self,
        page_number: int = Query(1, ge=1, alias="pageNumber"),
        page_size: int = Query(10, ge=1, le=100, alias="pageSize"),
    ):
        self.page_number = page_number
        self.page_size = page_size
