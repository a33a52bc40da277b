"""Changeset filter — drop per-file diff segments matched by ignore rules.

A unified diff is partitioned into segments at each ``diff --git a/... b/...``
header.  Segments are kept or dropped whole, so the output is always a valid
sub-diff and filtering is idempotent.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from commit_review.review.ignore import RuleSet, is_ignored

logger = logging.getLogger(__name__)

# Matches `diff --git a/path b/path`; captures the b/ side.
_DIFF_HEADER_RE = re.compile(r'^diff --git "?a/.+ "?b/(.+?)"?$')


@dataclass(frozen=True)
class DiffSegment:
    """One file's block of a unified diff (``path`` is None for a preamble)."""

    path: str | None
    lines: tuple[str, ...]

    @property
    def text(self) -> str:
        return "".join(self.lines)


_HEADER_PREFIX = "diff --git "


def header_path(line: str) -> str | None:
    """Return the new-side path if *line* is a file header, else None.

    Unquoted paths may themselves contain `` b/``, so an unchanged path is
    taken from two equal halves of the header before falling back to the
    regex (renames, quoted paths).
    """
    line = line.rstrip("\r\n")
    if not line.startswith(_HEADER_PREFIX):
        return None
    rest = line[len(_HEADER_PREFIX):]
    if rest.startswith("a/") and len(rest) % 2 == 1:
        half = len(rest) // 2
        old, sep, new = rest[:half], rest[half], rest[half + 1:]
        if sep == " " and new.startswith("b/") and old[2:] == new[2:]:
            return new[2:]
    match = _DIFF_HEADER_RE.match(line)
    return match.group(1) if match else None


def split_segments(diff: str) -> list[DiffSegment]:
    """Partition *diff* losslessly into per-file segments."""
    segments: list[DiffSegment] = []
    path: str | None = None
    lines: list[str] = []

    for line in diff.splitlines(keepends=True):
        new_path = header_path(line)
        if new_path is not None:
            if lines:
                segments.append(DiffSegment(path, tuple(lines)))
            path, lines = new_path, []
        lines.append(line)

    if lines:
        segments.append(DiffSegment(path, tuple(lines)))
    return segments


def filter_diff(diff: str, rules: RuleSet) -> str:
    """Return *diff* without the segments whose path is ignored by *rules*."""
    if not rules:
        return diff

    kept: list[str] = []
    for segment in split_segments(diff):
        if segment.path is not None and is_ignored(segment.path, rules):
            logger.debug("Ignoring %s", segment.path)
            continue
        kept.append(segment.text)
    return "".join(kept)


def changed_paths(diff: str) -> list[str]:
    """Paths touched by *diff*, in order."""
    return [s.path for s in split_segments(diff) if s.path is not None]
