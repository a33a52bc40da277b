"""Review backend protocol."""

from __future__ import annotations

from typing import Protocol


class ReviewBackend(Protocol):
    """A chat model endpoint that answers one review request with JSON text.

    Backends do no retrying of their own; ``call_with_retry`` drives them.
    """

    @property
    def name(self) -> str:
        """Short wire-API identifier, e.g. ``'openai'``, ``'anthropic'``."""
        ...

    @property
    def model(self) -> str: ...

    async def review(self, system_prompt: str, user_prompt: str) -> str:
        """Send one request and return the raw reply text."""
        ...

    async def close(self) -> None: ...
