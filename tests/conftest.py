"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest


def make_diff(*paths: str) -> str:
    """Build a minimal unified diff string touching the given file paths."""
    chunks = []
    for p in paths:
        chunks.append(
            f"diff --git a/{p} b/{p}\n"
            f"index 83db48f..bf269f4 100644\n"
            f"--- a/{p}\n"
            f"+++ b/{p}\n"
            f"@@ -1 +1 @@\n"
            f"-old\n"
            f"+new\n"
        )
    return "".join(chunks)


class FakeBackend:
    """Review backend returning canned replies (or raising canned errors)."""

    def __init__(self, *replies: Any) -> None:
        self._replies = list(replies)
        self.calls: list[tuple[str, str]] = []
        self.closed = False
        self.model = "fake-model"

    @property
    def name(self) -> str:
        return "fake"

    async def review(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, dict):
            return json.dumps(reply)
        return reply

    async def close(self) -> None:
        self.closed = True


class StatusError(Exception):
    """Stand-in for an SDK status error."""

    def __init__(self, status_code: int, message: str = "") -> None:
        super().__init__(message or f"HTTP {status_code}")
        self.status_code = status_code


@pytest.fixture
def msg_file(tmp_path: Path) -> Path:
    path = tmp_path / "COMMIT_EDITMSG"
    path.write_text("# original template\n")
    return path


@pytest.fixture
def base_env() -> dict[str, str]:
    return {"OPENAI_API_KEY": "sk-test", "AI_REVIEW_RETRY_DELAY": "10"}


@pytest.fixture
def no_sleep():
    waits: list[float] = []

    async def _sleep(seconds: float) -> None:
        waits.append(seconds)

    _sleep.waits = waits  # type: ignore[attr-defined]
    return _sleep
