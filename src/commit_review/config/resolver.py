"""Resolve the run configuration from environment-style values.

``load_environment`` gathers the raw key/value pairs (process environment,
then ``.env`` files); ``resolve_config`` is a pure function of that mapping.
Nothing downstream reads ``os.environ`` directly.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

from dotenv import dotenv_values

from commit_review.config.presets import (
    DEFAULT_PROVIDER,
    GENERIC_CREDENTIAL_KEY,
    get_preset,
)
from commit_review.models.config import ResolvedConfig

logger = logging.getLogger(__name__)

_PROXY_KEYS = ("HTTPS_PROXY", "HTTP_PROXY", "https_proxy", "http_proxy")
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})

_DEFAULTS = ResolvedConfig()


def load_environment(
    repo_root: Path,
    cwd: Path,
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Return the process environment overlaid with ``.env`` files.

    Later sources win: process env < ``<repo_root>/.env`` < ``<cwd>/.env``.
    """
    env = dict(os.environ if base is None else base)
    for path in (repo_root / ".env", cwd / ".env"):
        if path.is_file():
            values = dotenv_values(path)
            env.update({k: v for k, v in values.items() if v is not None})
            logger.debug("Loaded %d values from %s", len(values), path)
    return env


def _positive_int(env: Mapping[str, str], key: str, default: int) -> int:
    """Parse a positive integer; missing, invalid or zero values give *default*."""
    raw = env.get(key, "").strip()
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _positive_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key, "").strip()
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _flag(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE_VALUES


def resolve_config(env: Mapping[str, str]) -> ResolvedConfig:
    """Build a ``ResolvedConfig`` from *env*.

    Precedence per field: explicit override variable, then the selected
    provider's preset, then the OpenAI defaults (unknown provider names
    silently select those).
    """
    provider = (env.get("AI_PROVIDER") or DEFAULT_PROVIDER).strip().lower()
    preset = get_preset(provider)

    credential_key = preset["credential_env_key"]
    api_key = env.get(credential_key) or env.get(GENERIC_CREDENTIAL_KEY) or ""

    proxy = next((env[k] for k in _PROXY_KEYS if env.get(k)), None)

    return ResolvedConfig(
        provider=provider,
        api_key=api_key.strip(),
        credential_env_key=credential_key,
        base_url=env.get("OPENAI_BASE_URL") or preset["base_url"],
        model=env.get("OPENAI_MODEL") or preset["default_model"],
        wire_api=preset["wire_api"],
        proxy=proxy,
        max_diff_size=_positive_int(env, "AI_REVIEW_MAX_DIFF_SIZE", _DEFAULTS.max_diff_size),
        timeout_ms=_positive_int(env, "AI_REVIEW_TIMEOUT", _DEFAULTS.timeout_ms),
        max_retries=_positive_int(env, "AI_REVIEW_MAX_RETRIES", _DEFAULTS.max_retries),
        retry_delay_ms=_positive_int(env, "AI_REVIEW_RETRY_DELAY", _DEFAULTS.retry_delay_ms),
        rate_limit_multiplier=_positive_float(
            env, "AI_REVIEW_RATE_LIMIT_MULTIPLIER", _DEFAULTS.rate_limit_multiplier,
        ),
        skip_build=_flag(env, "AI_REVIEW_SKIP_BUILD", False),
        build_command=(env.get("AI_REVIEW_BUILD_COMMAND") or "").strip(),
        verbose=_flag(env, "AI_REVIEW_VERBOSE", False),
        append_reason=_flag(env, "AI_REVIEW_APPEND_REASON", True),
        ignore_file=env.get("AI_REVIEW_IGNORE_FILE") or None,
    )
