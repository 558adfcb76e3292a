"""Document model: an uploaded file whose bytes live in object storage."""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, BigInteger, Index
from sqlalchemy import Enum as SAEnum
from sqlalchemy.sql import func

from api.core.database import Base


class DocumentCategory(str, enum.Enum):
    research = "research"
    notes = "notes"
    pyq = "pyq"
    general = "general"

    @classmethod
    def coerce(cls, value) -> "DocumentCategory":
        """Map free-text input onto the fixed set; anything unknown is general."""
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.general


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Document(Base):
    """
    Metadata row for an uploaded document.
    Rows are created once and deleted on request; they are never updated.
    """
    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_owner_category_created", "owner_id", "category", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(255), nullable=False, index=True)

    # File metadata
    filename = Column(String(255), nullable=False)
    file_path = Column(String(1000), nullable=False, unique=True)  # Object storage key
    file_type = Column(String(255), nullable=False)  # Declared MIME type
    file_size = Column(BigInteger, nullable=False)  # Size in bytes
    extracted_text = Column(Text, nullable=True)
    category = Column(
        SAEnum(DocumentCategory, name="document_category", native_enum=False, length=20),
        nullable=False,
        default=DocumentCategory.general,
    )

    # Previous-year question paper metadata (category == pyq only)
    subject = Column(String(255), nullable=True)
    semester = Column(Integer, nullable=True)
    academic_year = Column(String(9), nullable=True)  # "YYYY-YYYY"

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now())
