"""
AI assistant chat endpoints.

Anonymous visitors may chat; a valid session token only changes what the
assistant is told about the visitor.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from app.auth.dependencies import Identity, get_optional_identity
from app.core.chat import ChatClient, build_system_prompt
from app.core.config import Settings, get_settings
from app.core.errors import AppError, ValidationError
from app.core.rate_limit import CHAT_RATE_LIMIT, CHAT_RATE_LIMIT_MESSAGE, limiter
from app.schemas.chat import ChatRequest, ChatResponse

router = APIRouter()


def get_chat_client(settings: Settings = Depends(get_settings)) -> ChatClient:
    return ChatClient(
        api_key=settings.anthropic_api_key,
        model=settings.chat_model,
        max_tokens=settings.chat_max_tokens,
        base_url=settings.anthropic_api_url,
        timeout=settings.chat_timeout,
    )


@router.post("", response_model=ChatResponse)
@limiter.limit(CHAT_RATE_LIMIT, error_message=CHAT_RATE_LIMIT_MESSAGE)
async def chat(
    request: Request,
    data: ChatRequest,
    identity: Optional[Identity] = Depends(get_optional_identity),
    client: ChatClient = Depends(get_chat_client),
):
    """Send the conversation so far and get the assistant's reply."""
    if not data.messages:
        raise ValidationError("Messages array is required", error="Invalid request")

    context = data.context
    system = build_system_prompt(
        page=context.page if context else None,
        section=context.section if context else None,
        authenticated=identity is not None,
    )
    reply = await client.complete(
        messages=[m.model_dump() for m in data.messages],
        system=system,
    )
    return ChatResponse(**reply)


@router.get("/health")
async def chat_health(client: ChatClient = Depends(get_chat_client)):
    """Check whether the AI service answers."""
    if not client.configured:
        return {"status": "unconfigured", "service": "Claude API"}

    try:
        reply = await client.complete(messages=[{"role": "user", "content": "hi"}], max_tokens=10)
    except AppError as e:
        return {"status": "unhealthy", "service": "Claude API", "error": e.message}

    return {"status": "healthy", "service": "Claude API", "model": reply["model"]}
