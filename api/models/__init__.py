# Import all models here so Base.metadata is complete for Alembic
from api.models.document import Document, DocumentCategory

__all__ = [
    "Document",
    "DocumentCategory",
]
