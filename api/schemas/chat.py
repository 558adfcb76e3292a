from typing import List, Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Full conversation so far; nothing is kept server-side between turns."""
    messages: List[ChatMessage] = Field(..., min_length=1)
    category: str = "general"
