"""Install the prepare-commit-msg hook and starter config into a repository."""

from __future__ import annotations

import logging
import stat
from pathlib import Path

from commit_review.git.repo import hooks_dir

logger = logging.getLogger(__name__)

HOOK_NAME = "prepare-commit-msg"

HOOK_CONTENT = """#!/bin/sh

# AI code review hook
# $1: commit message file
# $2: commit source (message, template, merge, squash, commit)
exec commit-review hook "$1" "$2"
"""

ENV_EXAMPLE = """# AI provider: openai, deepseek, openrouter, gemini, anthropic
AI_PROVIDER=openai
OPENAI_API_KEY=sk-your-api-key-here
# DEEPSEEK_API_KEY=
# OPENAI_BASE_URL=https://api.openai.com/v1
# OPENAI_MODEL=gpt-4o-mini

# Optional
# AI_REVIEW_MAX_DIFF_SIZE=15000
# AI_REVIEW_TIMEOUT=30000
# AI_REVIEW_MAX_RETRIES=3
# AI_REVIEW_RETRY_DELAY=1000
# AI_REVIEW_BUILD_COMMAND=make check
# AI_REVIEW_SKIP_BUILD=false
# AI_REVIEW_VERBOSE=false
# HTTPS_PROXY=http://127.0.0.1:7890
"""

GITIGNORE_BLOCK = "\n# Environment variables\n.env\n.env.local\n"


async def resolve_hook_path(repo_root: Path) -> Path:
    """``.husky/`` when the repository uses husky, else git's hooks directory."""
    husky = repo_root / ".husky"
    if husky.is_dir():
        return husky / HOOK_NAME
    return await hooks_dir(repo_root) / HOOK_NAME


def write_hook(hook_path: Path) -> None:
    hook_path.parent.mkdir(parents=True, exist_ok=True)
    hook_path.write_text(HOOK_CONTENT, encoding="utf-8")
    hook_path.chmod(hook_path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def write_env_example(repo_root: Path) -> bool:
    """Create ``.env.example`` unless one exists. Returns True if written."""
    path = repo_root / ".env.example"
    if path.exists():
        return False
    path.write_text(ENV_EXAMPLE, encoding="utf-8")
    return True


def ensure_env_gitignored(repo_root: Path) -> bool:
    """Append ``.env`` to ``.gitignore`` when absent. Returns True if changed."""
    path = repo_root / ".gitignore"
    content = path.read_text(encoding="utf-8") if path.exists() else ""
    if ".env" in content.split():
        return False
    with path.open("a", encoding="utf-8") as fh:
        fh.write(GITIGNORE_BLOCK)
    return True


async def install(repo_root: Path) -> Path:
    """Set up the hook and helper files; returns the hook path."""
    hook_path = await resolve_hook_path(repo_root)
    write_hook(hook_path)
    logger.info("Created git hook: %s", hook_path)

    if write_env_example(repo_root):
        logger.info("Created config example: .env.example")
    if ensure_env_gitignored(repo_root):
        logger.info("Updated .gitignore: added .env")
    return hook_path
