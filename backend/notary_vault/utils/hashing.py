import hashlib
import hmac


def sha256_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def hashes_match(expected: str, actual: str) -> bool:
    """Case-insensitive constant-time comparison of two hex digests."""
    return hmac.compare_digest(expected.lower(), actual.lower())
