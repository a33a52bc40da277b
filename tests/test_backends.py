"""Tests for the SDK-backed review backends and backend selection."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from commit_review.agent.claude import ClaudeReviewBackend
from commit_review.agent.openai_compat import OpenAICompatibleBackend
from commit_review.agent.registry import create_backend
from commit_review.config.resolver import resolve_config
from commit_review.errors import MalformedResponse


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_completion(content: str | None):
    """Build a mock chat-completions response."""
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message

    completion = MagicMock()
    completion.choices = [choice]
    completion.usage = None
    return completion


def _make_openai_client(completion) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion)
    client.close = AsyncMock()
    return client


def _make_claude_response(*texts: str):
    blocks = []
    for text in texts:
        block = MagicMock()
        block.type = "text"
        block.text = text
        blocks.append(block)

    usage = MagicMock()
    usage.input_tokens = 100
    usage.output_tokens = 20

    response = MagicMock()
    response.content = blocks
    response.usage = usage
    return response


# ---------------------------------------------------------------------------
# OpenAI-compatible backend
# ---------------------------------------------------------------------------


class TestOpenAICompatibleBackend:
    @pytest.mark.asyncio
    async def test_json_mode_request(self) -> None:
        client = _make_openai_client(_make_completion('{"is_passed": true}'))
        backend = OpenAICompatibleBackend("sk", "gpt-4o-mini", base_url="http://x", client=client)

        reply = await backend.review("system text", "user text")

        assert reply == '{"is_passed": true}'
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"] == [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "user text"},
        ]

    @pytest.mark.asyncio
    async def test_empty_content_is_malformed(self) -> None:
        client = _make_openai_client(_make_completion(None))
        backend = OpenAICompatibleBackend("sk", "m", base_url="http://x", client=client)
        with pytest.raises(MalformedResponse):
            await backend.review("s", "u")

    @pytest.mark.asyncio
    async def test_close(self) -> None:
        client = _make_openai_client(_make_completion("{}"))
        backend = OpenAICompatibleBackend("sk", "m", base_url="http://x", client=client)
        await backend.close()
        client.close.assert_awaited_once()

    def test_builds_sdk_client_with_sdk_retries_disabled(self) -> None:
        backend = OpenAICompatibleBackend("sk", "m", base_url="http://localhost:1234/v1", timeout=5)
        assert backend._client.max_retries == 0
        assert str(backend._client.base_url).startswith("http://localhost:1234/v1")


# ---------------------------------------------------------------------------
# Claude backend
# ---------------------------------------------------------------------------


class TestClaudeReviewBackend:
    @pytest.mark.asyncio
    async def test_concatenates_text_blocks(self) -> None:
        client = MagicMock()
        client.messages.create = AsyncMock(return_value=_make_claude_response('{"is_passed": ', "false}"))
        backend = ClaudeReviewBackend("key", "claude-haiku-4-5-20251001", client=client)

        assert await backend.review("sys", "diff") == '{"is_passed": false}'
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["system"] == "sys"
        assert kwargs["messages"] == [{"role": "user", "content": "diff"}]

    @pytest.mark.asyncio
    async def test_no_text_is_malformed(self) -> None:
        client = MagicMock()
        client.messages.create = AsyncMock(return_value=_make_claude_response())
        backend = ClaudeReviewBackend("key", "m", client=client)
        with pytest.raises(MalformedResponse):
            await backend.review("s", "u")


class TestCreateBackend:
    def test_openai_compatible_for_deepseek(self) -> None:
        cfg = resolve_config({"AI_PROVIDER": "deepseek", "DEEPSEEK_API_KEY": "k"})
        backend = create_backend(cfg)
        assert isinstance(backend, OpenAICompatibleBackend)
        assert backend.model == "deepseek-chat"

    def test_anthropic(self) -> None:
        cfg = resolve_config({"AI_PROVIDER": "anthropic", "ANTHROPIC_API_KEY": "k"})
        backend = create_backend(cfg)
        assert isinstance(backend, ClaudeReviewBackend)
        assert backend.name == "anthropic"
