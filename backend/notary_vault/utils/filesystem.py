from pathlib import Path
from notary_vault.config import settings


def ensure_vault_dirs(vault_path: Path | None = None) -> Path:
    path = vault_path or settings.vault_path
    path.mkdir(parents=True, exist_ok=True)
    (path / "objects").mkdir(exist_ok=True)
    return path


def sanitize_filename(name: str) -> str:
    keep = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789._-")
    return "".join(c if c in keep else "_" for c in name)
