"""Instantiate the review backend for a resolved configuration."""

from __future__ import annotations

import logging

from commit_review.agent.base import ReviewBackend
from commit_review.agent.claude import ClaudeReviewBackend
from commit_review.agent.openai_compat import OpenAICompatibleBackend
from commit_review.models.config import ResolvedConfig

logger = logging.getLogger(__name__)


def create_backend(config: ResolvedConfig) -> ReviewBackend:
    """Pick the SDK that speaks to the configured provider."""
    logger.debug(
        "Using provider=%s base_url=%s model=%s timeout=%dms proxy=%s",
        config.provider, config.base_url, config.model, config.timeout_ms,
        config.proxy or "none",
    )
    if config.wire_api == "anthropic":
        return ClaudeReviewBackend(
            config.api_key,
            config.model,
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            proxy=config.proxy,
        )
    return OpenAICompatibleBackend(
        config.api_key,
        config.model,
        base_url=config.base_url,
        timeout=config.timeout_seconds,
        proxy=config.proxy,
    )
