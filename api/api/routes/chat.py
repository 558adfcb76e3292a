"""Streaming study chat grounded in the caller's documents."""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from api.core.auth import OwnerContext, get_owner_context
from api.schemas.chat import ChatRequest
from api.services.ai_gateway import AIGatewayClient, get_ai_gateway
from api.services.document_store import DocumentStore, get_document_store
from workflows.study_chat import stream_study_chat

router = APIRouter()


@router.post("")
async def chat(
    request: ChatRequest,
    owner: OwnerContext = Depends(get_owner_context),
    store: DocumentStore = Depends(get_document_store),
    gateway: AIGatewayClient = Depends(get_ai_gateway),
):
    """
    One chat turn. The request carries the whole conversation; the response
    is the model's event stream, forwarded unbuffered.
    """
    documents = store.list_for_context(owner, request.category)
    messages = [m.model_dump() for m in request.messages]
    stream = await stream_study_chat(documents, request.category, messages, gateway)
    # Closing runs even if the client disconnects before the first chunk.
    return StreamingResponse(stream, media_type="text/event-stream", background=BackgroundTask(stream.aclose))
