"""Schemas for generated study materials (quiz, flashcards, summary, flowchart).

Field names are snake_case in Python and camelCase on the wire, matching the
function schemas the model is asked to fill in.
"""
import enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel


class ArtifactKind(str, enum.Enum):
    quiz = "quiz"
    flashcards = "flashcards"
    summary = "summary"
    flowchart = "flowchart"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _unique_ids(items: List[Any], prefix: str) -> None:
    """Give every item a distinct id, renumbering blanks and repeats in place."""
    seen = set()
    for index, item in enumerate(items, start=1):
        if not item.id or item.id in seen:
            candidate = f"{prefix}{index}"
            while candidate in seen:
                candidate = f"{candidate}_{index}"
            item.id = candidate
        seen.add(item.id)


# --- Quiz ---

class QuizQuestion(CamelModel):
    id: str = ""
    question: str
    type: Literal["mcq", "short"]
    options: Optional[List[str]] = None
    correct_answer: str

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v):
        return "" if v is None else str(v).strip()

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v):
        return str(v).strip().lower() if v is not None else v

    @model_validator(mode="after")
    def _options_only_for_mcq(self):
        if self.type == "short":
            self.options = None
        elif not self.options:
            raise ValueError("MCQ questions must include options")
        return self


class QuizResult(CamelModel):
    questions: List[QuizQuestion]

    @model_validator(mode="after")
    def _dedupe_ids(self):
        _unique_ids(self.questions, "q")
        return self


# --- Flashcards ---

class Flashcard(CamelModel):
    id: str = ""
    question: str
    answer: str

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v):
        return "" if v is None else str(v).strip()


class FlashcardSet(CamelModel):
    flashcards: List[Flashcard]

    @model_validator(mode="after")
    def _dedupe_ids(self):
        _unique_ids(self.flashcards, "f")
        return self


# --- Summary ---

class KeyDefinition(CamelModel):
    term: str
    definition: str


class SummaryResult(CamelModel):
    important_topics: List[str]
    key_definitions: List[KeyDefinition]
    revision_points: List[str]


# --- Flowchart ---

class FlowchartResult(CamelModel):
    mermaid_code: str
    title: str


# --- Request / response ---

class GenerationRequest(BaseModel):
    type: ArtifactKind

    @field_validator("type", mode="before")
    @classmethod
    def _known_kind(cls, v):
        value = str(v or "").strip().lower()
        if value not in {k.value for k in ArtifactKind}:
            raise ValueError("Invalid type. Use: quiz, flashcards, summary, or flowchart")
        return value


class GenerationResponse(BaseModel):
    success: bool = True
    type: ArtifactKind
    data: Optional[Dict[str, Any]] = None
    content: Optional[str] = None
