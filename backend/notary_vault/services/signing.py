import hashlib
import hmac
from abc import ABC, abstractmethod


class Signer(ABC):
    algorithm: str

    @abstractmethod
    def sign(self, data: bytes) -> bytes:
        ...

    @abstractmethod
    def verify(self, data: bytes, signature: bytes) -> bool:
        ...

    @abstractmethod
    def public_key(self) -> str:
        """Non-secret material a verifier can use to identify the signing key."""


class HmacSigner(Signer):
    """HMAC-SHA256 signer.

    A symmetric key has no public half, so ``public_key`` returns the key's
    SHA-256 fingerprint.
    """

    algorithm = "HMAC-SHA256"

    def __init__(self, key: str | bytes):
        self._key = key.encode() if isinstance(key, str) else key

    def sign(self, data: bytes) -> bytes:
        return hmac.new(self._key, data, hashlib.sha256).digest()

    def verify(self, data: bytes, signature: bytes) -> bool:
        return hmac.compare_digest(self.sign(data), signature)

    def public_key(self) -> str:
        return hashlib.sha256(self._key).hexdigest()
