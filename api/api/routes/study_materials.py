"""API routes for AI-generated study materials from notes."""

from fastapi import APIRouter, Depends

from api.core.auth import OwnerContext, get_owner_context
from api.models.document import DocumentCategory
from api.schemas.study_materials import GenerationRequest, GenerationResponse
from api.services.ai_gateway import AIGatewayClient, get_ai_gateway
from api.services.document_store import DocumentStore, get_document_store
from workflows.study_materials import generate_study_material

router = APIRouter()


@router.post("/generate", response_model=GenerationResponse, response_model_exclude_none=True)
async def generate(
    request: GenerationRequest,
    owner: OwnerContext = Depends(get_owner_context),
    store: DocumentStore = Depends(get_document_store),
    gateway: AIGatewayClient = Depends(get_ai_gateway),
):
    """
    Generate a quiz, flashcards, summary or concept map from the caller's notes.

    Returns {success, type, data}; if the model answered in plain text the
    text comes back as ``content`` instead of ``data``.
    """
    documents = store.list_documents(owner, DocumentCategory.notes)
    return await generate_study_material(documents, request.type, gateway)
