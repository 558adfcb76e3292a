"""
PYQ Analysis Workflow: topic trends and exam predictions from past papers.

Papers are grouped by subject and semester, formatted with their academic
year, capped in size, and sent as a single forced function call.
"""
import logging
from typing import Any, Dict, Sequence

from api.core.errors import UpstreamError
from api.models.document import Document
from api.schemas.pyq import PyqAnalysisResult
from api.services.ai_gateway import AIGatewayClient
from workflows.llm_utils import (
    build_pyq_context,
    ensure_documents,
    group_pyq_documents,
    validate_structured_result,
)
from workflows.prompts.pyq_prompts import PYQ_ANALYSIS_PROMPT, PYQ_SYSTEM_PROMPT
from workflows.tool_schemas import PYQ_ANALYSIS_TOOL

logger = logging.getLogger(__name__)


def build_pyq_prompt(documents: Sequence[Document]) -> str:
    ensure_documents(
        documents,
        "No PYQ documents found. Please upload previous year question papers first.",
    )
    groups = group_pyq_documents(documents)
    return PYQ_ANALYSIS_PROMPT.format(
        subject_list=", ".join(g.label for g in groups),
        document_context=build_pyq_context(groups),
    )


async def analyze_pyq(documents: Sequence[Document], gateway: AIGatewayClient) -> Dict[str, Any]:
    """Run the full PYQ analysis; returns {"success": True, "data": {...}}."""
    prompt = build_pyq_prompt(documents)
    logger.info(f"Analyzing {len(documents)} PYQ document(s)")

    result = await gateway.invoke(PYQ_SYSTEM_PROMPT, prompt, PYQ_ANALYSIS_TOOL)
    if not result.is_structured:
        logger.error(f"PYQ analysis returned text instead of a function call: {(result.content or '')[:300]}")
        raise UpstreamError("Failed to generate analysis")

    return {"success": True, "data": validate_structured_result(result.data, PyqAnalysisResult)}
