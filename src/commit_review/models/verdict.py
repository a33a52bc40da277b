"""Review verdict and hook outcome models."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictBool, ValidationError, field_validator, model_validator

# type(scope)!: description -- scope and "!" optional
CONVENTIONAL_COMMIT_RE = re.compile(
    r"^(?P<type>[A-Za-z]+)(?:\((?P<scope>[^()\r\n]+)\))?!?: (?P<description>\S.*)$"
)


def is_conventional_subject(message: str) -> bool:
    """Return True if the first line of *message* is a Conventional Commits subject."""
    subject = message.strip().splitlines()[0] if message.strip() else ""
    return CONVENTIONAL_COMMIT_RE.match(subject) is not None


class ReviewVerdict(BaseModel):
    """Validated structured response from the remote review."""

    model_config = ConfigDict(frozen=True)

    is_passed: StrictBool
    reason: str = ""
    message: str = ""

    @field_validator("reason", "message", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @model_validator(mode="after")
    def _message_required_when_passed(self) -> ReviewVerdict:
        if self.is_passed:
            if not self.message.strip():
                raise ValueError("message is required when is_passed is true")
            if not is_conventional_subject(self.message):
                raise ValueError(
                    f"message is not a Conventional Commits subject: {self.message[:100]!r}"
                )
        return self


@dataclass(frozen=True)
class InvalidResponse:
    """A response that could not be turned into a ``ReviewVerdict``."""

    raw: str
    detail: str


def _extract_json_text(raw: str) -> str:
    text = raw.strip()
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0]
    elif text.startswith("```"):
        text = text.split("```")[1].split("```")[0]
    return text.strip()


def parse_verdict(raw: str) -> ReviewVerdict | InvalidResponse:
    """Parse the model's raw reply into a verdict, never trusting its shape."""
    try:
        payload = json.loads(_extract_json_text(raw))
    except (json.JSONDecodeError, IndexError) as e:
        return InvalidResponse(raw=raw, detail=f"not JSON: {e}")

    if not isinstance(payload, dict):
        return InvalidResponse(raw=raw, detail=f"expected an object, got {type(payload).__name__}")

    try:
        return ReviewVerdict.model_validate(payload)
    except ValidationError as e:
        errors = "; ".join(err["msg"] for err in e.errors())
        return InvalidResponse(raw=raw, detail=errors)


def compose_commit_message(verdict: ReviewVerdict, append_reason: bool = True) -> str:
    """Final commit message for a passing verdict.

    The reason, if any, is appended as ``#`` comment lines, which git strips
    with the default cleanup mode.
    """
    message = verdict.message.strip()
    reason = verdict.reason.strip()
    if append_reason and reason:
        notes = "\n".join(f"# {line}".rstrip() for line in reason.splitlines())
        message = f"{message}\n\n# AI review notes:\n{notes}"
    return message


class OutcomeKind(str, Enum):
    SKIPPED = "skipped"
    PASSED = "passed"
    FAILED = "failed"
    BUILD_FAILED = "build_failed"


@dataclass(frozen=True)
class ReviewOutcome:
    """Result of one hook run. Only failures block the commit."""

    kind: OutcomeKind
    reason: str = ""
    message: str = ""

    @property
    def exit_code(self) -> int:
        return 1 if self.kind in (OutcomeKind.FAILED, OutcomeKind.BUILD_FAILED) else 0

    @classmethod
    def skipped(cls, reason: str) -> ReviewOutcome:
        return cls(kind=OutcomeKind.SKIPPED, reason=reason)
