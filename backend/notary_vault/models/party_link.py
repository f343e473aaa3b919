from sqlalchemy import Column, ForeignKey, Text
from sqlalchemy.orm import relationship
from notary_vault.database import Base


class PartyDocumentLink(Base):
    __tablename__ = "party_document_links"

    document_id = Column(Text, ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True)
    customer_id = Column(Text, ForeignKey("customers.id"), primary_key=True)
    party_role = Column(Text, nullable=False)
    signature_status = Column(Text, nullable=False, default="Pending")
    notary_date = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    document = relationship("Document", back_populates="party_links")
    customer = relationship("Customer", back_populates="party_links")
