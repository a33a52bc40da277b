"""Ignore-file patterns — compile .gitignore-style lines into path predicates.

A pattern is tokenized into literal runs and wildcards, then translated into
a regular expression:

* ``**``  any run of characters, crossing ``/`` (``**/`` also matches zero
  directories)
* ``*``   any run of characters except ``/``
* ``?``   exactly one character except ``/``

A leading ``/`` anchors the pattern at the repository root; otherwise it may
start at any path-segment boundary, so ``*.lock`` matches at every depth.
Matches must end at end-of-path or just before a ``/``, so ``dist`` also
covers everything under a ``dist`` directory.  Matching is case-sensitive.

Pure Python, no filesystem access except ``load_rule_set``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Sequence

logger = logging.getLogger(__name__)

IGNORE_FILE_NAME = ".aireviewignore"


class TokenKind(str, Enum):
    LITERAL = "literal"
    STAR = "star"
    DOUBLE_STAR = "double_star"
    DOUBLE_STAR_SLASH = "double_star_slash"
    QUESTION = "question"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str = ""


def tokenize_pattern(pattern: str) -> list[Token]:
    """Split *pattern* into literal and wildcard tokens."""
    tokens: list[Token] = []
    literal: list[str] = []
    i = 0

    def flush() -> None:
        if literal:
            tokens.append(Token(TokenKind.LITERAL, "".join(literal)))
            literal.clear()

    while i < len(pattern):
        ch = pattern[i]
        if ch == "*":
            flush()
            if pattern.startswith("**", i):
                if pattern.startswith("**/", i):
                    tokens.append(Token(TokenKind.DOUBLE_STAR_SLASH))
                    i += 3
                else:
                    tokens.append(Token(TokenKind.DOUBLE_STAR))
                    i += 2
                continue
            tokens.append(Token(TokenKind.STAR))
        elif ch == "?":
            flush()
            tokens.append(Token(TokenKind.QUESTION))
        else:
            literal.append(ch)
        i += 1

    flush()
    return tokens


_TOKEN_REGEX = {
    TokenKind.STAR: "[^/]*",
    TokenKind.DOUBLE_STAR: ".*",
    TokenKind.DOUBLE_STAR_SLASH: "(?:.*/)?",
    TokenKind.QUESTION: "[^/]",
}


def translate(tokens: Sequence[Token], anchored: bool) -> str:
    """Emit the regex source for a token stream."""
    body = "".join(
        re.escape(t.text) if t.kind is TokenKind.LITERAL else _TOKEN_REGEX[t.kind]
        for t in tokens
    )
    prefix = "^" if anchored else "(?:^|/)"
    return f"{prefix}{body}(?:/|$)"


@dataclass(frozen=True)
class IgnoreRule:
    """One compiled ignore-file line."""

    source_pattern: str
    negated: bool
    regex: re.Pattern[str]

    def matches(self, path: str) -> bool:
        return self.regex.search(path) is not None


RuleSet = tuple[IgnoreRule, ...]


def compile_rule(pattern: str) -> IgnoreRule:
    """Compile a single pattern line.

    Raises ValueError if nothing is left after stripping ``!`` and the
    leading/trailing slashes.
    """
    source = pattern
    negated = pattern.startswith("!")
    if negated:
        pattern = pattern[1:]

    anchored = pattern.startswith("/")
    body = pattern.strip("/")
    if not body:
        raise ValueError(f"Empty ignore pattern: {source!r}")

    return IgnoreRule(
        source_pattern=source,
        negated=negated,
        regex=re.compile(translate(tokenize_pattern(body), anchored)),
    )


def parse_rules(text: str) -> RuleSet:
    """Parse ignore-file content into rules, keeping file order."""
    rules: list[IgnoreRule] = []
    for lineno, line in enumerate(text.splitlines(), 1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            rules.append(compile_rule(line))
        except ValueError:
            logger.debug("Skipping invalid ignore pattern on line %d: %r", lineno, line)
    return tuple(rules)


def is_ignored(path: str, rules: Iterable[IgnoreRule]) -> bool:
    """Evaluate every rule in order; the last matching rule decides."""
    ignored = False
    for rule in rules:
        if rule.matches(path):
            ignored = not rule.negated
    return ignored


def load_rule_set(candidates: Iterable[Path]) -> RuleSet:
    """Load rules from the first existing candidate file (empty if none)."""
    for path in candidates:
        if path.is_file():
            rules = parse_rules(path.read_text(encoding="utf-8"))
            logger.debug("Loaded %d ignore rules from %s", len(rules), path)
            return rules
    return ()
