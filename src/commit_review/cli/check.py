"""Connectivity check against the configured provider."""

from __future__ import annotations

import logging
import time

from commit_review.agent.base import ReviewBackend
from commit_review.agent.diagnostics import describe_error
from commit_review.agent.registry import create_backend
from commit_review.agent.retry import call_with_retry
from commit_review.models.config import ResolvedConfig

logger = logging.getLogger(__name__)

_PING_SYSTEM = 'Reply with the JSON object {"ok": true} and nothing else.'
_PING_USER = "ping"


async def check_connection(config: ResolvedConfig, backend: ReviewBackend | None = None) -> bool:
    """Send one tiny request; log the result or a diagnosis."""
    if not config.api_key:
        logger.warning("No API key configured for provider %s (set %s).",
                       config.provider, config.credential_env_key)
        return False

    logger.info("Provider: %s", config.provider)
    logger.info("Base URL: %s", config.base_url)
    logger.info("Model:    %s", config.model)
    logger.info("Timeout:  %dms", config.timeout_ms)
    logger.info("Proxy:    %s", config.proxy or "not configured (set HTTPS_PROXY to enable)")

    owns_backend = backend is None
    backend = backend or create_backend(config)
    started = time.monotonic()
    try:
        reply = await call_with_retry(
            lambda: backend.review(_PING_SYSTEM, _PING_USER),
            config.max_retries,
            config.retry_delay_ms,
            rate_limit_multiplier=config.rate_limit_multiplier,
        )
    except Exception as e:
        logger.error("API check failed: %s", describe_error(e, config))
        logger.debug("Check failure details", exc_info=True)
        return False
    finally:
        if owns_backend:
            await backend.close()

    elapsed_ms = (time.monotonic() - started) * 1000
    logger.info("API reachable in %.0fms; reply: %s", elapsed_ms, reply.strip()[:200])
    return True
