"""Tests for remote-error diagnosis hints."""

from __future__ import annotations

import socket

import httpx
import openai
import pytest

from commit_review.agent.diagnostics import describe_error
from commit_review.config.resolver import resolve_config
from commit_review.errors import MalformedResponse

from conftest import StatusError

_CFG = resolve_config({"AI_PROVIDER": "deepseek", "AI_REVIEW_TIMEOUT": "1234"})
_REQUEST = httpx.Request("POST", "https://api.deepseek.com/chat/completions")


def _chained(outer: Exception, cause: BaseException) -> Exception:
    outer.__cause__ = cause
    return outer


class TestDescribeError:
    def test_timeout(self) -> None:
        assert "1234ms" in describe_error(openai.APITimeoutError(request=_REQUEST), _CFG)

    def test_dns_failure(self) -> None:
        exc = _chained(openai.APIConnectionError(request=_REQUEST), socket.gaierror("nodename"))
        assert "DNS" in describe_error(exc, _CFG)

    def test_connection_refused(self) -> None:
        exc = _chained(openai.APIConnectionError(request=_REQUEST), ConnectionRefusedError())
        assert "refused" in describe_error(exc, _CFG)

    def test_generic_connection_error_mentions_proxy(self) -> None:
        assert "HTTPS_PROXY" in describe_error(openai.APIConnectionError(request=_REQUEST), _CFG)

    @pytest.mark.parametrize("status,fragment", [
        (401, "DEEPSEEK_API_KEY"),
        (403, "permission"),
        (404, "deepseek-chat"),
        (429, "quota"),
        (503, "server error"),
    ])
    def test_status_codes(self, status: int, fragment: str) -> None:
        assert fragment in describe_error(StatusError(status), _CFG)

    def test_malformed(self) -> None:
        assert "unusable" in describe_error(MalformedResponse("x", "not JSON"), _CFG)

    def test_fallback(self) -> None:
        assert describe_error(RuntimeError("boom"), _CFG) == "RuntimeError: boom"
