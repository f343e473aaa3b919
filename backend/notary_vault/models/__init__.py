from notary_vault.models.customer import Customer
from notary_vault.models.document import Document
from notary_vault.models.party_link import PartyDocumentLink
from notary_vault.models.document_file import DocumentFile

__all__ = ["Customer", "Document", "PartyDocumentLink", "DocumentFile"]
