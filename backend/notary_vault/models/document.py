from sqlalchemy import Column, Text
from sqlalchemy.orm import relationship
from notary_vault.database import Base


class Document(Base):
    __tablename__ = "documents"

    id = Column(Text, primary_key=True)
    transaction_code = Column(Text, nullable=False, unique=True)
    secretary = Column(Text)
    notary_public = Column(Text)
    document_type = Column(Text)
    description = Column(Text)
    created_date = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    party_links = relationship(
        "PartyDocumentLink", back_populates="document", cascade="all, delete-orphan"
    )
    files = relationship("DocumentFile", back_populates="document", cascade="all, delete-orphan")
