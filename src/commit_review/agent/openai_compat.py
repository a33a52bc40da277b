"""Review backend for OpenAI-compatible chat-completions endpoints.

Covers OpenAI itself plus DeepSeek, OpenRouter and Gemini's compatibility
surface — anything that accepts ``response_format={"type": "json_object"}``.
"""

from __future__ import annotations

import logging

import httpx
import openai

from commit_review.errors import MalformedResponse

logger = logging.getLogger(__name__)

_TEMPERATURE = 0.3


class OpenAICompatibleBackend:
    """JSON-mode chat completion via the official ``openai`` SDK."""

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        base_url: str,
        timeout: float = 30.0,
        proxy: str | None = None,
        client: openai.AsyncOpenAI | None = None,
    ) -> None:
        self.model = model
        if client is None:
            http_client = httpx.AsyncClient(proxy=proxy, timeout=timeout) if proxy else None
            client = openai.AsyncOpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=0,  # retries are handled by call_with_retry
                http_client=http_client,
            )
        self._client = client

    @property
    def name(self) -> str:
        return "openai"

    async def review(self, system_prompt: str, user_prompt: str) -> str:
        completion = await self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            response_format={"type": "json_object"},
            temperature=_TEMPERATURE,
        )
        if not completion.choices or not completion.choices[0].message.content:
            raise MalformedResponse("", "completion has no content")

        if completion.usage:
            logger.debug(
                "Tokens: prompt=%s completion=%s total=%s",
                completion.usage.prompt_tokens,
                completion.usage.completion_tokens,
                completion.usage.total_tokens,
            )
        return completion.choices[0].message.content

    async def close(self) -> None:
        await self._client.close()
