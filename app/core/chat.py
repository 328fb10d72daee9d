"""
Thin client for the Anthropic Messages API used by the chat widget.
"""

import logging
from typing import Any, Optional

import httpx

from app.core.errors import AppError, ServiceUnavailableError, UpstreamError

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"

SYSTEM_PROMPT = """You are the Endevera AI Assistant, a helpful and professional chatbot for Endevera Technologies, LLC.

Endevera helps municipalities and companies finance, develop, and deploy broadband and technology infrastructure across three pillars: ADVISE, DEVELOP and INVEST.

- Be professional, concise and solution-focused.
- Current deals and specific investment opportunities are only available to approved accredited investors in the member portal.
- For pricing or custom solutions, recommend contacting the team directly.
- Never make up information about team members, projects, or capabilities."""


def build_system_prompt(page: Optional[str], section: Optional[str], authenticated: bool) -> str:
    prompt = SYSTEM_PROMPT
    prompt += "\n\nCURRENT CONTEXT:\n"
    prompt += f"- User is on page: {page or 'unknown'}\n"
    prompt += f"- Page section: {section or 'general'}\n"
    prompt += f"- User authenticated: {'Yes' if authenticated else 'No'}\n"
    if authenticated:
        prompt += (
            "\nThe user is logged in to the member portal. "
            "You can provide more detailed information about investments and deals."
        )
    return prompt


class ChatClient:
    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        max_tokens: int = 1000,
        base_url: str = "https://api.anthropic.com",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def complete(
        self,
        messages: list[dict[str, str]],
        system: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> dict[str, Any]:
        """
        Send one Messages API request.

        Returns ``{"message", "id", "model"}``.

        Raises:
            ServiceUnavailableError: no API key configured
            UpstreamError: the API rejected or failed the request
        """
        if not self.configured:
            raise ServiceUnavailableError("Chat service is not configured", error="Chat unavailable")

        body: dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens or self.max_tokens,
            "messages": messages,
        }
        if system:
            body["system"] = system

        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(f"{self.base_url}/v1/messages", json=body, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Chat API request failed: %s", e)
            raise UpstreamError("Unable to reach the AI service. Please try again.", error="Chat service error")

        if response.status_code == 429:
            raise UpstreamError(
                "Too many requests to AI service. Please try again in a moment.",
                error="Rate limit exceeded",
                status_code=429,
            )
        if response.status_code in (401, 403):
            logger.error("Chat API rejected the configured key (%s)", response.status_code)
            raise AppError(
                "AI service authentication failed. Please contact support.",
                error="Configuration error",
            )
        if response.status_code != 200:
            logger.error("Chat API error %s: %s", response.status_code, response.text[:500])
            raise UpstreamError("Unable to process your message. Please try again.", error="Chat service error")

        data = response.json()
        text = "".join(
            block.get("text", "") for block in data.get("content", []) if block.get("type") == "text"
        )
        return {"message": text, "id": data.get("id", ""), "model": data.get("model", self.model)}
