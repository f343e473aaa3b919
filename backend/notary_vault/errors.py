"""
Exceptions raised by the notary vault services.

Routers never translate these themselves; the handlers registered in
``notary_vault.main`` turn them into HTTP responses.
"""


class NotaryVaultError(Exception):
    """Base class for exceptions in this package."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, **extra):
        self.message = message
        self.extra = extra
        super().__init__(message)


class NotFoundError(NotaryVaultError):
    """Raised when a get or update targets an entity that does not exist."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' not found.")


class ConflictError(NotaryVaultError):
    """Raised on a uniqueness violation."""

    status_code = 409
    code = "CONFLICT"


class InvalidInputError(NotaryVaultError):
    """Raised for malformed input or a reference to a missing related entity."""

    status_code = 400
    code = "INVALID_INPUT"


class StorageUnavailableError(NotaryVaultError):
    """Raised when object storage cannot be read or written."""

    status_code = 503
    code = "STORAGE_UNAVAILABLE"
