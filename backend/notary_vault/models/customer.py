from sqlalchemy import Column, Text
from sqlalchemy.orm import relationship
from notary_vault.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Text, primary_key=True)
    full_name = Column(Text, nullable=False)
    address = Column(Text)
    phone = Column(Text)
    email = Column(Text)
    customer_kind = Column(Text, nullable=False, default="Individual")
    document_id = Column(Text, unique=True)
    passport_id = Column(Text, unique=True)
    business_registration_number = Column(Text, unique=True)
    business_name = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    party_links = relationship("PartyDocumentLink", back_populates="customer")
