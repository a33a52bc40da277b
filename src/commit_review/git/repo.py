"""Git and shell helpers via asyncio subprocesses."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from commit_review.errors import BuildCheckFailed, GitCommandError

logger = logging.getLogger(__name__)


async def run_git(
    *args: str,
    cwd: str | Path | None = None,
    check: bool = True,
    strip: bool = True,
) -> str:
    """Run a git command and return stdout."""
    cmd = ["git"] + list(args)
    logger.debug("git %s (cwd=%s)", " ".join(args), cwd)
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        cwd=cwd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate()
    if check and proc.returncode != 0:
        raise GitCommandError(list(args), proc.returncode or 1, stderr.decode(errors="replace"))
    output = stdout.decode(errors="replace")
    return output.strip() if strip else output


async def find_repo_root(cwd: Path) -> Path:
    """Top-level directory of the work tree containing *cwd*.

    Falls back to *cwd* when git is unavailable or *cwd* is not a repository.
    """
    try:
        top = await run_git("rev-parse", "--show-toplevel", cwd=cwd)
    except (GitCommandError, OSError) as e:
        logger.debug("Not resolving repo root (%s); using %s", e, cwd)
        return cwd
    return Path(top) if top else cwd


async def hooks_dir(repo_root: Path) -> Path:
    """Directory git reads hooks from (honours core.hooksPath)."""
    path = Path(await run_git("rev-parse", "--git-path", "hooks", cwd=repo_root))
    return path if path.is_absolute() else repo_root / path


async def staged_diff(repo_root: Path) -> str:
    """Unified diff of the index against HEAD (``git diff --cached``).

    Output format is pinned so user settings such as ``diff.noprefix``,
    ``diff.mnemonicPrefix`` or ``color.diff=always`` cannot change the
    ``diff --git a/... b/...`` headers the ignore filter splits on.
    """
    return await run_git(
        "diff",
        "--cached",
        "--no-color",
        "--no-ext-diff",
        "--src-prefix=a/",
        "--dst-prefix=b/",
        cwd=repo_root,
        strip=False,
    )


async def run_build_check(command: str, cwd: Path) -> None:
    """Run the build/check *command* with inherited stdio.

    Raises BuildCheckFailed on a non-zero exit.
    """
    logger.info("Running build check: %s", command)
    proc = await asyncio.create_subprocess_shell(command, cwd=cwd)
    returncode = await proc.wait()
    if returncode != 0:
        raise BuildCheckFailed(command, returncode)
    logger.info("Build check passed")
