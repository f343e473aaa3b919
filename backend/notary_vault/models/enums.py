from enum import Enum


class CustomerKind(str, Enum):
    INDIVIDUAL = "Individual"
    BUSINESS = "Business"


class PartyRole(str, Enum):
    PARTY_A = "PartyA"
    PARTY_B = "PartyB"
    WITNESS = "Witness"


class SignatureStatus(str, Enum):
    PENDING = "Pending"
    SIGNED = "Signed"
    REJECTED = "Rejected"


class NaturalKey(str, Enum):
    DOCUMENT_ID = "document_id"
    PASSPORT_ID = "passport_id"
    BUSINESS_REGISTRATION_NUMBER = "business_registration_number"
