"""Document store: object storage plus metadata rows, scoped by owner."""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Union

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.core.auth import OwnerContext
from api.core.config import get_settings
from api.core.database import get_db
from api.core.errors import NotFound, PersistenceError, StorageError, ValidationError
from api.models.document import Document, DocumentCategory
from api.services.storage import StorageService, get_storage_service
from api.services.text_extraction import extract_text, is_allowed_file

logger = logging.getLogger(__name__)

MAX_FILENAME_LENGTH = 255
ACADEMIC_YEAR_PATTERN = re.compile(r"^\d{4}-\d{4}$")


@dataclass(frozen=True)
class PyqMetadata:
    """Subject/semester/year attached to a previous-year question paper."""
    subject: Optional[str] = None
    semester: Optional[int] = None
    academic_year: Optional[str] = None


def parse_pyq_metadata(
    subject: Optional[str],
    semester: Union[str, int, None],
    academic_year: Optional[str],
) -> Optional[PyqMetadata]:
    """Validate the optional PYQ form fields. Returns None if none were sent."""
    subject = (subject or "").strip() or None
    academic_year = (academic_year or "").strip() or None

    semester_value = None
    if semester not in (None, ""):
        try:
            semester_value = int(semester)
        except (TypeError, ValueError):
            raise ValidationError("Semester must be a whole number")
        if semester_value < 1:
            raise ValidationError("Semester must be a positive number")

    if academic_year and not ACADEMIC_YEAR_PATTERN.match(academic_year):
        raise ValidationError("Academic year must look like YYYY-YYYY")

    if subject is None and semester_value is None and academic_year is None:
        return None
    return PyqMetadata(subject=subject, semester=semester_value, academic_year=academic_year)


class DocumentStore:
    """
    Upload, list and delete documents for one owner at a time.

    Every call goes to the database; nothing is cached.
    """

    def __init__(self, db: Session, storage: StorageService, max_file_size_bytes: Optional[int] = None):
        self.db = db
        self.storage = storage
        self.max_file_size_bytes = max_file_size_bytes or get_settings().max_upload_size_bytes

    # --- Validation ---

    def validate_upload(self, content: bytes, filename: str, content_type: str) -> None:
        if not filename:
            raise ValidationError("File is required")
        if len(content) > self.max_file_size_bytes:
            limit_mb = self.max_file_size_bytes // (1024 * 1024)
            raise ValidationError(f"File size exceeds {limit_mb}MB limit")
        if not is_allowed_file(filename, content_type):
            raise ValidationError("File type not allowed")

    # --- Operations ---

    def upload(
        self,
        content: bytes,
        filename: str,
        content_type: Optional[str],
        category: Union[str, DocumentCategory, None],
        owner: OwnerContext,
        pyq: Optional[PyqMetadata] = None,
    ) -> Document:
        """
        Store the file, then its metadata row.

        If the row cannot be written the stored object is removed again so
        nothing is left orphaned in the bucket.
        """
        content_type = content_type or "application/octet-stream"
        self.validate_upload(content, filename, content_type)
        category = DocumentCategory.coerce(category)

        if not self.storage.is_enabled():
            raise StorageError("File storage service is not configured")

        file_path = self.storage.generate_path(owner.user_id, filename)
        success, error = self.storage.upload_file(file_path, content, content_type)
        if not success:
            logger.error(f"Upload failed for owner {owner.user_id}: {error}")
            raise StorageError("Failed to upload file")

        document = Document(
            owner_id=owner.user_id,
            filename=filename[:MAX_FILENAME_LENGTH],
            file_path=file_path,
            file_type=content_type,
            file_size=len(content),
            extracted_text=extract_text(content, content_type, filename),
            category=category,
        )
        if category == DocumentCategory.pyq and pyq is not None:
            document.subject = pyq.subject
            document.semester = pyq.semester
            document.academic_year = pyq.academic_year

        try:
            self.db.add(document)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error saving document metadata for {file_path}: {e}")
            self._remove_orphan(file_path)
            raise PersistenceError("Failed to save document metadata") from e

        # The row is committed from here on; its object must stay.
        try:
            self.db.refresh(document)
        except SQLAlchemyError as e:
            logger.error(f"Database error reloading document metadata for {file_path}: {e}")
            raise PersistenceError("Failed to fetch documents") from e

        logger.info(f"Document uploaded: {document.id} ({category.value}) for owner {owner.user_id}")
        return document

    def list_documents(self, owner: OwnerContext, category: Union[str, DocumentCategory, None]) -> List[Document]:
        """Owner's documents in one category, newest first."""
        category = DocumentCategory.coerce(category)
        try:
            return (
                self.db.query(Document)
                .filter(Document.owner_id == owner.user_id, Document.category == category)
                .order_by(Document.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Database error listing documents for owner {owner.user_id}: {e}")
            raise PersistenceError("Failed to fetch documents") from e

    def list_for_context(self, owner: OwnerContext, category: Union[str, DocumentCategory, None]) -> List[Document]:
        """Documents a chat in ``category`` may read; general chat sees all of the owner's documents."""
        category = DocumentCategory.coerce(category)
        if category != DocumentCategory.general:
            return self.list_documents(owner, category)
        try:
            return (
                self.db.query(Document)
                .filter(Document.owner_id == owner.user_id)
                .order_by(Document.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Database error listing documents for owner {owner.user_id}: {e}")
            raise PersistenceError("Failed to fetch documents") from e

    def delete(self, document_id: str, owner: OwnerContext) -> None:
        """
        Delete a document the owner holds: storage object first, then the row.

        Deleting another owner's document, or one that does not exist,
        raises NotFound.
        """
        try:
            document = (
                self.db.query(Document)
                .filter(Document.id == document_id, Document.owner_id == owner.user_id)
                .first()
            )
        except SQLAlchemyError as e:
            logger.error(f"Database error loading document {document_id}: {e}")
            raise PersistenceError("Failed to fetch documents") from e

        if document is None:
            raise NotFound("Document not found")

        success, error = self.storage.delete_file(document.file_path)
        if not success:
            logger.error(f"Storage delete failed for document {document_id}: {error}")
            raise StorageError("Failed to delete file")

        try:
            # A concurrent delete may already have removed the row; that is fine.
            self.db.query(Document).filter(
                Document.id == document_id,
                Document.owner_id == owner.user_id,
            ).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error deleting document {document_id}: {e}")
            raise PersistenceError("Failed to delete document") from e

        logger.info(f"Document deleted: {document_id}")

    def _remove_orphan(self, file_path: str) -> None:
        """Best-effort delete of an object whose row was never written. Only logs on failure."""
        try:
            success, error = self.storage.delete_file(file_path)
        except Exception as e:
            success, error = False, repr(e)
        if not success:
            logger.error(f"Could not remove orphaned object {file_path}: {error}")


def get_document_store(
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
) -> DocumentStore:
    return DocumentStore(db, storage)
