"""
Study Materials Workflow: quiz, flashcards, summary and concept map.

Each artifact kind maps to exactly one (prompt, tool schema, result model)
triple. The notes are formatted into the prompt, the gateway is forced to
call the kind's function, and the payload is validated before it is returned.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Sequence, Type

from pydantic import BaseModel

from api.models.document import Document
from api.schemas.study_materials import (
    ArtifactKind,
    FlashcardSet,
    FlowchartResult,
    QuizResult,
    SummaryResult,
)
from api.services.ai_gateway import AIGatewayClient
from workflows.llm_utils import (
    ensure_documents,
    format_documents_for_prompt,
    validate_structured_result,
)
from workflows.prompts.study_material_prompts import (
    STUDY_MATERIAL_SYSTEM_PROMPT,
    QUIZ_PROMPT,
    FLASHCARDS_PROMPT,
    SUMMARY_PROMPT,
    FLOWCHART_PROMPT,
)
from workflows.tool_schemas import QUIZ_TOOL, FLASHCARDS_TOOL, SUMMARY_TOOL, FLOWCHART_TOOL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactSpec:
    prompt_template: str
    tool: Dict[str, Any]
    result_model: Type[BaseModel]


ARTIFACT_SPECS: Dict[ArtifactKind, ArtifactSpec] = {
    ArtifactKind.quiz: ArtifactSpec(QUIZ_PROMPT, QUIZ_TOOL, QuizResult),
    ArtifactKind.flashcards: ArtifactSpec(FLASHCARDS_PROMPT, FLASHCARDS_TOOL, FlashcardSet),
    ArtifactKind.summary: ArtifactSpec(SUMMARY_PROMPT, SUMMARY_TOOL, SummaryResult),
    ArtifactKind.flowchart: ArtifactSpec(FLOWCHART_PROMPT, FLOWCHART_TOOL, FlowchartResult),
}


def build_study_material_request(documents: Sequence[Document], kind: ArtifactKind) -> tuple:
    """Return (user_prompt, tool) for ``kind`` over ``documents``."""
    ensure_documents(documents, "No documents found. Please upload study notes first.")
    artifact = ARTIFACT_SPECS[ArtifactKind(kind)]
    prompt = artifact.prompt_template.format(document_context=format_documents_for_prompt(documents))
    return prompt, artifact.tool


async def generate_study_material(
    documents: Sequence[Document],
    kind: ArtifactKind,
    gateway: AIGatewayClient,
) -> Dict[str, Any]:
    """
    Generate one study artifact from the given notes.

    Returns:
        {"success": True, "type": kind, "data": {...}} when the model filled
        in the function, or {"success": True, "type": kind, "content": str}
        when it answered in plain text instead
    """
    kind = ArtifactKind(kind)
    prompt, tool = build_study_material_request(documents, kind)
    logger.info(f"Generating {kind.value} from {len(documents)} document(s)")

    result = await gateway.invoke(STUDY_MATERIAL_SYSTEM_PROMPT, prompt, tool)

    if result.is_structured:
        data = validate_structured_result(result.data, ARTIFACT_SPECS[kind].result_model)
        return {"success": True, "type": kind.value, "data": data}

    logger.warning(f"Model answered {kind.value} request without a function call; returning text")
    return {"success": True, "type": kind.value, "content": result.content}
