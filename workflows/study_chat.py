"""Study chat: category persona + document context, streamed back as-is."""
import logging
from typing import AsyncIterable, Dict, List, Sequence, Union

from api.models.document import Document, DocumentCategory
from api.services.ai_gateway import AIGatewayClient
from workflows.llm_utils import ensure_documents, format_chat_context
from workflows.prompts.chat_prompts import (
    GENERAL_CHAT_PROMPT,
    NOTES_CHAT_PROMPT,
    PYQ_CHAT_PROMPT,
    RESEARCH_CHAT_PROMPT,
)

logger = logging.getLogger(__name__)

CHAT_PROMPTS: Dict[DocumentCategory, str] = {
    DocumentCategory.research: RESEARCH_CHAT_PROMPT,
    DocumentCategory.notes: NOTES_CHAT_PROMPT,
    DocumentCategory.pyq: PYQ_CHAT_PROMPT,
    DocumentCategory.general: GENERAL_CHAT_PROMPT,
}


def build_chat_system_prompt(documents: Sequence[Document], category: Union[str, DocumentCategory]) -> str:
    ensure_documents(documents, "No documents found. Please upload documents before chatting.")
    template = CHAT_PROMPTS[DocumentCategory.coerce(category)]
    return template.format(document_context=format_chat_context(documents))


async def stream_study_chat(
    documents: Sequence[Document],
    category: Union[str, DocumentCategory],
    messages: List[Dict[str, str]],
    gateway: AIGatewayClient,
) -> AsyncIterable[bytes]:
    """Start the chat completion and hand back the upstream byte stream."""
    system_prompt = build_chat_system_prompt(documents, category)
    logger.info(f"Chat turn ({DocumentCategory.coerce(category).value}) over {len(documents)} document(s)")
    return await gateway.stream_chat(system_prompt, messages)
