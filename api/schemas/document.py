from datetime import datetime
from typing import List, Optional

from api.models.document import DocumentCategory
from api.schemas.base import BaseSchema


class DocumentResponse(BaseSchema):
    id: str
    filename: str
    file_path: str
    file_type: str
    file_size: int
    extracted_text: Optional[str] = None
    category: DocumentCategory
    subject: Optional[str] = None
    semester: Optional[int] = None
    academic_year: Optional[str] = None
    created_at: datetime


class DocumentUploadResponse(BaseSchema):
    success: bool = True
    document: DocumentResponse
    message: str = "Document uploaded successfully"


class DocumentListResponse(BaseSchema):
    documents: List[DocumentResponse]
    total: int
