"""Exception types raised inside the review pipeline."""

from __future__ import annotations


class ReviewError(Exception):
    """Base class for errors raised by commit_review itself."""


class BuildCheckFailed(ReviewError):
    """The configured build/check command exited non-zero.

    This is the one infrastructure failure that blocks the commit.
    """

    def __init__(self, command: str, returncode: int) -> None:
        super().__init__(f"Build command failed (rc={returncode}): {command}")
        self.command = command
        self.returncode = returncode


class MalformedResponse(ReviewError):
    """The remote review did not return the expected JSON object."""

    def __init__(self, raw: str, detail: str) -> None:
        super().__init__(f"Malformed review response: {detail}")
        self.raw = raw
        self.detail = detail


class GitCommandError(ReviewError):
    def __init__(self, args: list[str], returncode: int, stderr: str) -> None:
        super().__init__(
            f"git {' '.join(args)} failed (rc={returncode}): {stderr.strip()}"
        )
        self.command_args = args
        self.returncode = returncode
        self.stderr = stderr
