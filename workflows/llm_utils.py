"""
Shared prompt utilities for all generation workflows.

Provides:
- The "no documents" guard every flow runs before calling the gateway
- Document context formatting for notes, chat and PYQ prompts
- PYQ grouping by subject and semester with per-document and global caps
- Validation of structured results against their pydantic models
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from api.core.errors import UpstreamError, ValidationError
from api.models.document import Document

logger = logging.getLogger(__name__)

PYQ_PER_DOCUMENT_CHARS = 15_000
PYQ_CONTEXT_CHARS = 60_000
TRUNCATION_MARKER = "\n[Content truncated...]"
NO_TEXT_PLACEHOLDER = "[No text extracted yet]"


def ensure_documents(documents: Sequence[Document], message: Optional[str] = None) -> None:
    """Refuse to build a prompt with nothing to ground it in."""
    if not documents:
        raise ValidationError(message or "No documents found. Please upload documents first.")


def format_documents_for_prompt(documents: Sequence[Document]) -> str:
    """Format documents as numbered blocks for study material prompts."""
    return "\n\n".join(
        f"[Document {i}: {doc.filename}]\n{doc.extracted_text or ''}"
        for i, doc in enumerate(documents, start=1)
    )


def format_chat_context(documents: Sequence[Document]) -> str:
    """Format documents as the delimited block appended to chat system prompts."""
    lines = ["---UPLOADED DOCUMENTS---"]
    for i, doc in enumerate(documents, start=1):
        lines.append("")
        lines.append(f"[Document {i}: {doc.filename}]")
        lines.append(doc.extracted_text or NO_TEXT_PLACEHOLDER)
    lines.append("")
    lines.append("---END OF DOCUMENTS---")
    return "\n".join(lines)


# ============ PYQ grouping ============

@dataclass
class PyqGroup:
    """All question papers for one subject and semester."""
    subject: str
    semester: int
    documents: List[Document] = field(default_factory=list)
    years: List[str] = field(default_factory=list)

    @property
    def label(self) -> str:
        return f"{self.subject} (Sem {self.semester})"


def group_pyq_documents(documents: Sequence[Document]) -> List[PyqGroup]:
    """
    Group question papers by (subject, semester), keeping first-seen order.

    Papers without a subject land in "Unknown Subject"; without a semester,
    in semester 1.
    """
    groups: Dict[tuple, PyqGroup] = {}
    for doc in documents:
        key = (doc.subject or "Unknown", doc.semester or 0)
        group = groups.get(key)
        if group is None:
            group = PyqGroup(subject=doc.subject or "Unknown Subject", semester=doc.semester or 1)
            groups[key] = group
        group.documents.append(doc)
        if doc.academic_year and doc.academic_year not in group.years:
            group.years.append(doc.academic_year)
    return list(groups.values())


def build_pyq_context(
    groups: Sequence[PyqGroup],
    per_document_chars: int = PYQ_PER_DOCUMENT_CHARS,
    max_chars: int = PYQ_CONTEXT_CHARS,
) -> str:
    """
    Build the PYQ context block.

    Each paper contributes at most ``per_document_chars`` of text; the whole
    block is cut at ``max_chars`` with a truncation marker.
    """
    parts = []
    for group in groups:
        parts.append(f"\n\n=== SUBJECT: {group.subject} | SEMESTER: {group.semester} ===\n")
        for doc in group.documents:
            parts.append(f"\n[Year: {doc.academic_year or 'Unknown'} | File: {doc.filename}]\n")
            parts.append((doc.extracted_text or "")[:per_document_chars])

    context = "".join(parts)
    if len(context) > max_chars:
        context = context[:max_chars] + TRUNCATION_MARKER
    return context


# ============ Result validation ============

def validate_structured_result(data: Dict[str, Any], model: Type[BaseModel]) -> Dict[str, Any]:
    """
    Check a tool-call payload against its schema and return the normalized
    camelCase dict. A payload that doesn't fit is an upstream failure.
    """
    try:
        parsed = model.model_validate(data)
    except PydanticValidationError as e:
        logger.error(f"AI output did not match {model.__name__}: {e}")
        raise UpstreamError("AI service returned malformed output") from e
    return parsed.model_dump(by_alias=True, exclude_none=True)
