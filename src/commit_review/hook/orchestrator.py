"""Review orchestrator — the prepare-commit-msg pipeline.

Flow:
  1. Invocation gate on the commit source (no I/O before this)
  2. Resolve config once; no credential → advisory, allow commit
  3. Read the staged diff; empty → allow commit
  4. Filter it through the ignore rules; nothing left → allow commit
  5. Optional build check; a failure blocks the commit
  6. Truncate to ``max_diff_size``
  7. Remote review through ``call_with_retry``; parse the verdict
  8. Pass → write the commit message; fail → block the commit

Anything unexpected in steps 3-8 is logged and the commit is allowed
(fail-open).  Only a build failure or a negative verdict blocks.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Mapping

from commit_review.agent.base import ReviewBackend
from commit_review.agent.diagnostics import describe_error
from commit_review.agent.prompt import PromptComposer, truncate_diff
from commit_review.agent.registry import create_backend
from commit_review.agent.retry import Sleep, call_with_retry
from commit_review.config.resolver import load_environment, resolve_config
from commit_review.errors import BuildCheckFailed, MalformedResponse
from commit_review.git.repo import find_repo_root, run_build_check, staged_diff
from commit_review.hook.gate import evaluate_commit_source
from commit_review.models.config import ResolvedConfig
from commit_review.models.verdict import (
    InvalidResponse,
    OutcomeKind,
    ReviewOutcome,
    compose_commit_message,
    parse_verdict,
)
from commit_review.review.diff_filter import filter_diff
from commit_review.review.ignore import IGNORE_FILE_NAME, load_rule_set

logger = logging.getLogger(__name__)

BYPASS_HINT = "Use `git commit --no-verify` to skip the check."

DiffReader = Callable[[Path], Awaitable[str]]
BuildRunner = Callable[[str, Path], Awaitable[None]]


def ignore_file_candidates(config: ResolvedConfig, repo_root: Path, cwd: Path) -> list[Path]:
    """Ignore-file locations in priority order; the first existing one is used."""
    candidates: list[Path] = []
    if config.ignore_file:
        explicit = Path(config.ignore_file)
        candidates.append(explicit if explicit.is_absolute() else repo_root / explicit)
    candidates.append(repo_root / IGNORE_FILE_NAME)
    if cwd != repo_root:
        candidates.append(cwd / IGNORE_FILE_NAME)
    return candidates


class ReviewOrchestrator:
    """Runs one review pass for a single ``git commit`` invocation.

    Collaborators (diff reader, build runner, backend, sleep) are injectable
    so the pipeline can run without git or network access.
    """

    def __init__(
        self,
        config: ResolvedConfig,
        repo_root: Path,
        cwd: Path | None = None,
        *,
        backend: ReviewBackend | None = None,
        read_diff: DiffReader = staged_diff,
        run_build: BuildRunner = run_build_check,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.config = config
        self.repo_root = repo_root
        self.cwd = cwd or repo_root
        self._backend = backend
        self._owns_backend = backend is None
        self._read_diff = read_diff
        self._run_build = run_build
        self._sleep = sleep
        self._composer = PromptComposer()

    async def run(self, msg_file: Path) -> ReviewOutcome:
        try:
            return await self._review(msg_file)
        except BuildCheckFailed as e:
            logger.error("Build check failed (rc=%d); fix the build and commit again.", e.returncode)
            logger.error(BYPASS_HINT)
            return ReviewOutcome(kind=OutcomeKind.BUILD_FAILED, reason=str(e))
        except Exception as e:
            logger.warning("AI review error: %s", describe_error(e, self.config))
            logger.debug("Review failure details", exc_info=True)
            logger.warning("Skipping AI review; commit allowed.")
            return ReviewOutcome.skipped(f"review unavailable: {e}")
        finally:
            if self._owns_backend and self._backend is not None:
                await self._close_backend()

    async def _review(self, msg_file: Path) -> ReviewOutcome:
        diff = await self._read_diff(self.repo_root)
        if not diff.strip():
            logger.info("No staged changes; nothing to review.")
            return ReviewOutcome.skipped("no staged changes")

        rules = load_rule_set(ignore_file_candidates(self.config, self.repo_root, self.cwd))
        filtered = filter_diff(diff, rules)
        if not filtered.strip():
            logger.info("All staged changes match ignore rules; nothing to review.")
            return ReviewOutcome.skipped("all changes ignored")

        if self.config.build_command and not self.config.skip_build:
            await self._run_build(self.config.build_command, self.repo_root)

        reviewed, truncated = truncate_diff(filtered, self.config.max_diff_size)
        system_prompt = self._composer.compose_system_prompt()
        user_prompt = self._composer.compose_user_prompt(reviewed, truncated)

        backend = self._get_backend()
        logger.info("Running AI code review (%s)...", self.config.model)
        raw = await call_with_retry(
            lambda: backend.review(system_prompt, user_prompt),
            self.config.max_retries,
            self.config.retry_delay_ms,
            rate_limit_multiplier=self.config.rate_limit_multiplier,
            sleep=self._sleep,
        )

        verdict = parse_verdict(raw)
        if isinstance(verdict, InvalidResponse):
            raise MalformedResponse(verdict.raw, verdict.detail)

        if not verdict.is_passed:
            logger.error("AI review failed.")
            logger.error("Reason: %s", verdict.reason or "(no reason given)")
            logger.error(BYPASS_HINT)
            return ReviewOutcome(kind=OutcomeKind.FAILED, reason=verdict.reason)

        message = compose_commit_message(verdict, self.config.append_reason)
        msg_file.write_text(message, encoding="utf-8")
        logger.info("AI review passed.")
        logger.info("Commit message: %s", verdict.message)
        if verdict.reason and not self.config.append_reason:
            logger.info("Suggestions: %s", verdict.reason)
        return ReviewOutcome(kind=OutcomeKind.PASSED, reason=verdict.reason, message=message)

    def _get_backend(self) -> ReviewBackend:
        if self._backend is None:
            self._backend = create_backend(self.config)
        return self._backend

    async def _close_backend(self) -> None:
        # Closing never changes the outcome.
        try:
            await self._backend.close()
        except Exception:
            logger.debug("Error closing %s backend", self._backend.name, exc_info=True)


async def run_review(
    msg_file: str | Path,
    commit_source: str | None,
    *,
    env: Mapping[str, str] | None = None,
    cwd: Path | None = None,
    backend: ReviewBackend | None = None,
    read_diff: DiffReader = staged_diff,
    run_build: BuildRunner = run_build_check,
    sleep: Sleep = asyncio.sleep,
) -> ReviewOutcome:
    """Hook entry point: gate, configure, then run the orchestrator.

    When *env* is None the process environment and ``.env`` files are used.
    """
    decision = evaluate_commit_source(commit_source)
    if not decision.proceed:
        logger.info("Skipping AI review (%s).", decision.reason)
        return ReviewOutcome.skipped(decision.reason)

    cwd = cwd or Path.cwd()
    repo_root = await find_repo_root(cwd)
    if env is None:
        env = load_environment(repo_root, cwd)
    config = resolve_config(env)
    if config.verbose:
        logging.getLogger("commit_review").setLevel(logging.DEBUG)

    if not config.api_key:
        logger.warning(
            "No API key found: set %s (or OPENAI_API_KEY) in .env at the project root.",
            config.credential_env_key,
        )
        logger.warning("Skipping AI review; commit allowed.")
        return ReviewOutcome.skipped("no API key configured")

    orchestrator = ReviewOrchestrator(
        config,
        repo_root,
        cwd,
        backend=backend,
        read_diff=read_diff,
        run_build=run_build,
        sleep=sleep,
    )
    return await orchestrator.run(Path(msg_file))
