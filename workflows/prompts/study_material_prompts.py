"""
Prompts for generating study materials from a student's notes.

{document_context} is the formatted notes (see format_documents_for_prompt).
"""

STUDY_MATERIAL_SYSTEM_PROMPT = (
    "You are an expert exam preparation assistant. "
    "Generate high-quality study materials based only on the provided notes."
)


QUIZ_PROMPT = """Based on the following study notes, generate 5 quiz questions. Mix MCQ (multiple choice) and short answer questions. Make them challenging but fair for exam preparation.

STUDY NOTES:
{document_context}

Guidelines:
- Every question must be answerable from the notes above
- Give each question a distinct id
- Include options only for MCQ questions, and make the correct answer one of them"""


FLASHCARDS_PROMPT = """Based on the following study notes, generate 8 flashcards for effective revision. Each flashcard should have a question on one side and a concise answer on the other.

STUDY NOTES:
{document_context}

Focus on key definitions, concepts, and important facts. Use the notes' own terminology in the answers."""


SUMMARY_PROMPT = """Based on the following study notes, create an exam-oriented summary. Include:
1. Important Topics (bullet points)
2. Key Definitions (term: definition format)
3. Quick revision points

STUDY NOTES:
{document_context}

Focus on what's most likely to appear in exams."""


FLOWCHART_PROMPT = """Based on the following study notes, create a concept map in Mermaid.js flowchart syntax. Show relationships between main concepts.

STUDY NOTES:
{document_context}

The mermaidCode must be valid Mermaid.js flowchart syntax starting with "flowchart TD"."""
