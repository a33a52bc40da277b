"""Prompt composer — system instruction from templates, diff as user message."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

_PROMPTS_DIR = Path(__file__).parent.parent / "prompts" / "v1"

REVIEWER_ROLE = "commit_reviewer"


def _load_template(role: str) -> str:
    """Load a prompt template by role name."""
    path = _PROMPTS_DIR / f"{role}.md"
    if not path.exists():
        raise FileNotFoundError(f"Prompt template not found: {path}")
    return path.read_text(encoding="utf-8")


class PromptComposer:
    """Builds the two messages of a review request."""

    def compose_system_prompt(self, role: str = REVIEWER_ROLE) -> str:
        return _load_template(role).strip()

    def compose_user_prompt(self, diff: str, truncated: bool = False) -> str:
        """Embed the staged diff in the user message."""
        parts = ["Review the following staged changes and reply with the JSON object."]
        if truncated:
            parts.append("Note: the diff was truncated to fit the size limit.")
        parts.append(f"```diff\n{diff}\n```")
        return "\n\n".join(parts)


def truncate_diff(diff: str, max_chars: int) -> tuple[str, bool]:
    """Cut *diff* to *max_chars*; the flag says whether anything was dropped."""
    if len(diff) <= max_chars:
        return diff, False
    logger.warning(
        "Diff is large (%.1fKB); consider splitting the commit. "
        "Only the first %.1fKB will be reviewed.",
        len(diff) / 1000, max_chars / 1000,
    )
    return diff[:max_chars], True
