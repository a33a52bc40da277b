"""Claude review backend — a single Messages API call using the Anthropic SDK."""

from __future__ import annotations

import logging

import anthropic
import httpx

from commit_review.errors import MalformedResponse

logger = logging.getLogger(__name__)

_MAX_TOKENS = 1024
_TEMPERATURE = 0.3


class ClaudeReviewBackend:
    """Review backend for the native Anthropic API."""

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        base_url: str | None = None,
        timeout: float = 30.0,
        proxy: str | None = None,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        self.model = model
        if client is None:
            http_client = httpx.AsyncClient(proxy=proxy, timeout=timeout) if proxy else None
            client = anthropic.AsyncAnthropic(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=0,
                http_client=http_client,
            )
        self._client = client

    @property
    def name(self) -> str:
        return "anthropic"

    async def review(self, system_prompt: str, user_prompt: str) -> str:
        response = await self._client.messages.create(
            model=self.model,
            max_tokens=_MAX_TOKENS,
            temperature=_TEMPERATURE,
            system=system_prompt,
            messages=[
                {"role": "user", "content": user_prompt},
            ],
        )

        text = ""
        for block in response.content:
            if block.type == "text":
                text += block.text
        if not text.strip():
            raise MalformedResponse("", "response has no text content")

        logger.debug(
            "Tokens: input=%s output=%s",
            response.usage.input_tokens, response.usage.output_tokens,
        )
        return text

    async def close(self) -> None:
        await self._client.close()
