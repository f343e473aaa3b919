from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    vault_path: Path = Path.home() / "NotaryVault"
    storage_bucket: str = "notary-documents"
    max_upload_bytes: int = 50 * 1024 * 1024  # 50 MiB
    allowed_content_types: list[str] = [
        "application/pdf",
        "image/jpeg",
        "image/png",
        "image/gif",
    ]
    signing_key: str = "change-me-notary-signing-key"
    # Strip and upper-case document/passport/registration numbers before
    # storing or matching them. False means exact string match.
    normalize_natural_keys: bool = True
    # Individuals may only carry document/passport IDs, businesses only a
    # registration number.
    enforce_kind_natural_keys: bool = False
    log_level: str = "INFO"
    api_prefix: str = "/api/v1"
    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def db_path(self) -> Path:
        return self.vault_path / "db.sqlite"

    @property
    def storage_path(self) -> Path:
        return self.vault_path / "objects"

    model_config = {"env_prefix": "NOTARY_"}


settings = Settings()
