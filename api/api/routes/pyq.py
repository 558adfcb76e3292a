"""API routes for previous-year question paper analysis."""

from fastapi import APIRouter, Depends

from api.core.auth import OwnerContext, get_owner_context
from api.models.document import DocumentCategory
from api.schemas.pyq import PyqAnalysisResponse
from api.services.ai_gateway import AIGatewayClient, get_ai_gateway
from api.services.document_store import DocumentStore, get_document_store
from workflows.pyq_analysis import analyze_pyq

router = APIRouter()


@router.post("/analyze", response_model=PyqAnalysisResponse)
async def analyze(
    owner: OwnerContext = Depends(get_owner_context),
    store: DocumentStore = Depends(get_document_store),
    gateway: AIGatewayClient = Depends(get_ai_gateway),
):
    """Analyze all of the caller's PYQ uploads, grouped by subject and semester."""
    documents = store.list_documents(owner, DocumentCategory.pyq)
    return await analyze_pyq(documents, gateway)
