"""
Function-calling schemas for structured generation.

Each schema is a tool definition ({name, description, parameters}); the
gateway client forces the model to call it, so the arguments come back in
exactly this shape.
"""
from typing import Any, Dict


def _array_of(item_schema: Dict[str, Any], description: str = "") -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "array", "items": item_schema}
    if description:
        schema["description"] = description
    return schema


def _object(properties: Dict[str, Any], required: list) -> Dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required}


QUIZ_TOOL = {
    "name": "generate_quiz",
    "description": "Generate quiz questions from study notes",
    "parameters": _object(
        {
            "questions": _array_of(_object(
                {
                    "id": {"type": "string"},
                    "question": {"type": "string"},
                    "type": {"type": "string", "enum": ["mcq", "short"]},
                    "options": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Only for MCQ type questions",
                    },
                    "correctAnswer": {"type": "string"},
                },
                ["id", "question", "type", "correctAnswer"],
            )),
        },
        ["questions"],
    ),
}


FLASHCARDS_TOOL = {
    "name": "generate_flashcards",
    "description": "Generate flashcards from study notes",
    "parameters": _object(
        {
            "flashcards": _array_of(_object(
                {
                    "id": {"type": "string"},
                    "question": {"type": "string"},
                    "answer": {"type": "string"},
                },
                ["id", "question", "answer"],
            )),
        },
        ["flashcards"],
    ),
}


SUMMARY_TOOL = {
    "name": "generate_summary",
    "description": "Generate exam-oriented summary from study notes",
    "parameters": _object(
        {
            "importantTopics": _array_of({"type": "string"}),
            "keyDefinitions": _array_of(_object(
                {"term": {"type": "string"}, "definition": {"type": "string"}},
                ["term", "definition"],
            )),
            "revisionPoints": _array_of({"type": "string"}),
        },
        ["importantTopics", "keyDefinitions", "revisionPoints"],
    ),
}


FLOWCHART_TOOL = {
    "name": "generate_flowchart",
    "description": "Generate Mermaid.js concept map from study notes",
    "parameters": _object(
        {
            "mermaidCode": {"type": "string", "description": "Valid Mermaid.js flowchart code"},
            "title": {"type": "string"},
        },
        ["mermaidCode", "title"],
    ),
}


# ============ PYQ analysis ============

_TOPIC_FREQUENCY = _object(
    {
        "topic": {"type": "string"},
        "frequency": {"type": "number"},
        "percentage": {"type": "number"},
    },
    ["topic", "frequency", "percentage"],
)

_PREDICTION_LIST = _array_of(_object(
    {"topic": {"type": "string"}, "probability": {"type": "number"}},
    ["topic", "probability"],
))

_SUBJECT_YEAR_SERIES = _object(
    {
        "subject": {"type": "string"},
        "semester": {"type": "number"},
        "yearData": _array_of(_object(
            {"year": {"type": "string"}, "topics": _array_of(_TOPIC_FREQUENCY)},
            ["year", "topics"],
        )),
    },
    ["subject", "semester", "yearData"],
)

PYQ_ANALYSIS_TOOL = {
    "name": "analyze_pyq_comprehensive",
    "description": "Comprehensive PYQ analysis with subject-wise breakdown",
    "parameters": _object(
        {
            "subjectAnalyses": _array_of(
                _object(
                    {
                        "subject": {"type": "string"},
                        "semester": {"type": "number"},
                        "topicFrequency": _array_of(_TOPIC_FREQUENCY),
                        "topicDistribution": _array_of(_object(
                            {"name": {"type": "string"}, "value": {"type": "number"}},
                            ["name", "value"],
                        )),
                        "predictions": _object(
                            {"ct1": _PREDICTION_LIST, "ct2": _PREDICTION_LIST, "endsem": _PREDICTION_LIST},
                            ["ct1", "ct2", "endsem"],
                        ),
                        "studyRecommendation": {"type": "string"},
                    },
                    ["subject", "semester", "topicFrequency", "topicDistribution", "predictions", "studyRecommendation"],
                ),
                "Analysis for each subject-semester combination",
            ),
            "comparisons": _array_of(_SUBJECT_YEAR_SERIES, "Year-over-year comparison for each subject"),
            "timelines": _array_of(_SUBJECT_YEAR_SERIES, "Timeline data for trend visualization"),
        },
        ["subjectAnalyses"],
    ),
}
