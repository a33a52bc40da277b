"""Invocation gate — decide from the commit source whether to review at all.

Git passes ``prepare-commit-msg`` a second argument describing where the
initial message came from.  Only interactive commits (no source) and
template-based ones get a review; everything else already has a message
someone chose, or is a merge/squash git composed itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CommitSource(str, Enum):
    INTERACTIVE = ""
    MESSAGE = "message"     # -m / -F
    TEMPLATE = "template"   # -t or commit.template
    MERGE = "merge"
    SQUASH = "squash"
    COMMIT = "commit"       # -c / -C / --amend


_REVIEWED_SOURCES = frozenset({CommitSource.INTERACTIVE, CommitSource.TEMPLATE})

_SKIP_REASONS: dict[CommitSource, str] = {
    CommitSource.MESSAGE: "commit message supplied on the command line",
    CommitSource.MERGE: "merge commit",
    CommitSource.SQUASH: "squash commit",
    CommitSource.COMMIT: "amend or reused commit message",
}


@dataclass(frozen=True)
class GateDecision:
    proceed: bool
    reason: str = ""


def evaluate_commit_source(source: str | None) -> GateDecision:
    """Return whether the review should run for *source*."""
    try:
        tag = CommitSource((source or "").strip().lower())
    except ValueError:
        return GateDecision(proceed=False, reason=f"unrecognised commit source {source!r}")

    if tag in _REVIEWED_SOURCES:
        return GateDecision(proceed=True)
    return GateDecision(proceed=False, reason=_SKIP_REASONS[tag])
