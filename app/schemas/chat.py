"""
Chat widget schemas.
"""

from typing import List, Literal, Optional

from pydantic import Field

from app.schemas.common import CamelModel


class ChatMessage(CamelModel):
    role: Literal["user", "assistant"]
    content: str = Field(min_length=1, max_length=8000)


class ChatContext(CamelModel):
    page: Optional[str] = Field(default=None, max_length=200)
    section: Optional[str] = Field(default=None, max_length=200)


class ChatRequest(CamelModel):
    messages: List[ChatMessage] = Field(default_factory=list, max_length=50)
    context: Optional[ChatContext] = None


class ChatResponse(CamelModel):
    message: str
    id: str
    model: str
