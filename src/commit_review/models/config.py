"""Configuration models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ResolvedConfig(BaseModel):
    """Effective configuration for one hook run.

    Built once by ``resolve_config`` from environment-style values layered
    over the provider presets; read-only afterwards.
    """

    model_config = ConfigDict(frozen=True)

    provider: str = Field(default="openai", description="Lower-cased provider name.")
    api_key: str = Field(default="", repr=False)
    credential_env_key: str = Field(
        default="OPENAI_API_KEY",
        description="Variable the credential was expected under (for advisories).",
    )
    base_url: str = Field(default="https://api.openai.com/v1")
    model: str = Field(default="gpt-4o-mini")
    wire_api: str = Field(default="openai", description="'openai' or 'anthropic'.")
    proxy: str | None = Field(default=None, description="HTTP(S) proxy URL.")
    max_diff_size: int = Field(default=15000, description="Characters sent to the model.")
    timeout_ms: int = Field(default=30000)
    max_retries: int = Field(default=3, description="Total attempts per remote call.")
    retry_delay_ms: int = Field(default=1000)
    rate_limit_multiplier: float = Field(
        default=2.0,
        description="Extra backoff factor applied to rate-limited attempts.",
    )
    skip_build: bool = False
    build_command: str = ""
    verbose: bool = False
    append_reason: bool = Field(
        default=True,
        description="Append the model's notes to the commit message as comments.",
    )
    ignore_file: str | None = None

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000
