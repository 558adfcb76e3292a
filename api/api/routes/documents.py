"""API routes for documents (upload/list/delete)."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status

from api.core.auth import OwnerContext, get_owner_context
from api.models.document import DocumentCategory
from api.schemas.document import DocumentListResponse, DocumentResponse, DocumentUploadResponse
from api.services.document_store import DocumentStore, get_document_store, parse_pyq_metadata

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=DocumentUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile = File(...),
    category: Optional[str] = Form("general"),
    subject: Optional[str] = Form(None),
    semester: Optional[str] = Form(None),
    academic_year: Optional[str] = Form(None),
    owner: OwnerContext = Depends(get_owner_context),
    store: DocumentStore = Depends(get_document_store),
):
    """
    Upload a document.

    - Maximum file size: 50MB
    - Allowed: pdf, txt, md, doc, docx, png, jpg/jpeg, webp
    - Unknown categories are stored as "general"
    - subject / semester / academic_year are kept for PYQ uploads only
    """
    pyq = parse_pyq_metadata(subject, semester, academic_year)
    content = await file.read()

    document = store.upload(
        content=content,
        filename=file.filename or "",
        content_type=file.content_type,
        category=category,
        owner=owner,
        pyq=pyq,
    )
    return DocumentUploadResponse(document=DocumentResponse.model_validate(document))


@router.get("", response_model=DocumentListResponse)
def list_documents(
    category: str = Query(DocumentCategory.general.value, description="Document category"),
    owner: OwnerContext = Depends(get_owner_context),
    store: DocumentStore = Depends(get_document_store),
):
    """List the caller's documents in a category, newest first."""
    documents = store.list_documents(owner, category)
    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(d) for d in documents],
        total=len(documents),
    )


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(
    document_id: str,
    owner: OwnerContext = Depends(get_owner_context),
    store: DocumentStore = Depends(get_document_store),
):
    """
    Delete a document.

    - Removes the stored file, then the metadata row
    - Documents owned by someone else are reported as not found
    """
    store.delete(document_id, owner)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
