"""Turn remote-call exceptions into short, actionable hints."""

from __future__ import annotations

import socket

import anthropic
import openai

from commit_review.errors import MalformedResponse
from commit_review.models.config import ResolvedConfig

_TIMEOUT_ERRORS = (openai.APITimeoutError, anthropic.APITimeoutError, TimeoutError)
_CONNECTION_ERRORS = (openai.APIConnectionError, anthropic.APIConnectionError)


def _causes(exc: BaseException):
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def describe_error(exc: BaseException, config: ResolvedConfig) -> str:
    """One-line diagnosis of why the review request failed."""
    chain = list(_causes(exc))

    if any(isinstance(e, _TIMEOUT_ERRORS) for e in chain):
        return (
            f"Request timed out after {config.timeout_ms}ms; raise AI_REVIEW_TIMEOUT "
            f"or check latency to {config.base_url}"
        )
    if any(isinstance(e, socket.gaierror) for e in chain):
        return f"DNS lookup failed for {config.base_url}; check OPENAI_BASE_URL and DNS settings"
    if any(isinstance(e, ConnectionRefusedError) for e in chain):
        return f"Connection refused by {config.base_url}; check OPENAI_BASE_URL or the proxy"
    if isinstance(exc, _CONNECTION_ERRORS):
        hint = f" via proxy {config.proxy}" if config.proxy else "; set HTTPS_PROXY if a proxy is required"
        return f"Cannot reach {config.base_url}{hint}"
    if isinstance(exc, MalformedResponse):
        return f"The model returned an unusable response ({exc.detail})"

    status = getattr(exc, "status_code", None)
    if status == 401:
        return f"API key rejected; check {config.credential_env_key} in .env"
    if status == 403:
        return f"API key lacks permission for model {config.model}"
    if status == 404:
        return f"Model {config.model!r} not found; check OPENAI_MODEL"
    if status == 429:
        return "Rate limited or out of quota; wait a few minutes or check billing"
    if isinstance(status, int) and status >= 500:
        return f"{config.provider} server error ({status}); try again later"
    return f"{type(exc).__name__}: {exc}"
