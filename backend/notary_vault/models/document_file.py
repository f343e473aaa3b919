from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from notary_vault.database import Base


class DocumentFile(Base):
    __tablename__ = "document_files"

    id = Column(Text, primary_key=True)
    document_id = Column(Text, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False)
    file_name = Column(Text, nullable=False)
    file_size = Column(Integer, nullable=False)
    content_type = Column(Text, nullable=False)
    bucket = Column(Text, nullable=False)
    storage_key = Column(Text, nullable=False, unique=True)
    sha256_hash = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    document = relationship("Document", back_populates="files")
