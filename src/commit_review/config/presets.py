"""Provider preset registry.

Each supported provider maps to the endpoint, default model and credential
variable used when the user only sets ``AI_PROVIDER``.  Unknown provider
names fall back to ``DEFAULT_PROVIDER``.
"""

from __future__ import annotations

from typing import Literal, TypedDict

WireAPI = Literal["openai", "anthropic"]


class ProviderPreset(TypedDict):
    """Static defaults for one AI provider."""
    name: str
    base_url: str
    default_model: str
    credential_env_key: str
    wire_api: WireAPI  # which SDK speaks to this endpoint


DEFAULT_PROVIDER = "openai"

# Key used when the provider-specific credential is not set.
GENERIC_CREDENTIAL_KEY = "OPENAI_API_KEY"

PROVIDER_PRESETS: dict[str, ProviderPreset] = {
    "openai": {
        "name": "OpenAI",
        "base_url": "https://api.openai.com/v1",
        "default_model": "gpt-4o-mini",
        "credential_env_key": "OPENAI_API_KEY",
        "wire_api": "openai",
    },
    "deepseek": {
        "name": "DeepSeek",
        "base_url": "https://api.deepseek.com",
        "default_model": "deepseek-chat",
        "credential_env_key": "DEEPSEEK_API_KEY",
        "wire_api": "openai",
    },
    "openrouter": {
        "name": "OpenRouter",
        "base_url": "https://openrouter.ai/api/v1",
        "default_model": "openai/gpt-4o-mini",
        "credential_env_key": "OPENROUTER_API_KEY",
        "wire_api": "openai",
    },
    "gemini": {
        "name": "Google Gemini",
        # OpenAI-compatible surface of the Gemini API
        "base_url": "https://generativelanguage.googleapis.com/v1beta/openai/",
        "default_model": "gemini-2.0-flash",
        "credential_env_key": "GEMINI_API_KEY",
        "wire_api": "openai",
    },
    "anthropic": {
        "name": "Anthropic",
        "base_url": "https://api.anthropic.com",
        "default_model": "claude-haiku-4-5-20251001",
        "credential_env_key": "ANTHROPIC_API_KEY",
        "wire_api": "anthropic",
    },
}


def get_preset(provider: str) -> ProviderPreset:
    """Return the preset for *provider*, or the default preset if unknown."""
    return PROVIDER_PRESETS.get(provider.lower(), PROVIDER_PRESETS[DEFAULT_PROVIDER])


def list_providers() -> list[dict]:
    """Return a flat list of presets, for help output."""
    return [
        {
            "id": key,
            "name": preset["name"],
            "default_model": preset["default_model"],
            "credential_env_key": preset["credential_env_key"],
        }
        for key, preset in PROVIDER_PRESETS.items()
    ]
