"""Tests for verdict parsing, validation and commit message composition."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from commit_review.models.verdict import (
    InvalidResponse,
    OutcomeKind,
    ReviewOutcome,
    ReviewVerdict,
    compose_commit_message,
    is_conventional_subject,
    parse_verdict,
)


class TestConventionalSubject:
    @pytest.mark.parametrize("message", [
        "feat(auth): add token check",
        "fix: handle empty diff",
        "refactor(core)!: drop legacy API",
        "docs(readme): update\n\nLonger body here.",
    ])
    def test_valid(self, message: str) -> None:
        assert is_conventional_subject(message)

    @pytest.mark.parametrize("message", [
        "",
        "add token check",
        "feat(auth) add token check",
        "feat():  x",
        "feat: ",
    ])
    def test_invalid(self, message: str) -> None:
        assert not is_conventional_subject(message)


class TestReviewVerdict:
    def test_passing_requires_message(self) -> None:
        with pytest.raises(ValidationError):
            ReviewVerdict(is_passed=True, message="")

    def test_passing_requires_conventional_message(self) -> None:
        with pytest.raises(ValidationError):
            ReviewVerdict(is_passed=True, message="updated stuff")

    def test_failing_without_message(self) -> None:
        verdict = ReviewVerdict(is_passed=False, reason="secret")
        assert verdict.message == ""

    def test_none_fields_become_empty(self) -> None:
        verdict = ReviewVerdict.model_validate({"is_passed": False, "reason": None, "message": None})
        assert verdict.reason == ""

    def test_is_passed_must_be_bool(self) -> None:
        with pytest.raises(ValidationError):
            ReviewVerdict.model_validate({"is_passed": "yes", "message": "feat: x"})


# ---------------------------------------------------------------------------
# parse_verdict
# ---------------------------------------------------------------------------


class TestParseVerdict:
    def test_passing(self) -> None:
        raw = json.dumps({"is_passed": True, "reason": "", "message": "feat(auth): add token check"})
        verdict = parse_verdict(raw)
        assert isinstance(verdict, ReviewVerdict)
        assert verdict.is_passed
        assert verdict.message == "feat(auth): add token check"

    def test_failing_without_message_field(self) -> None:
        verdict = parse_verdict('{"is_passed": false, "reason": "hardcoded secret detected"}')
        assert isinstance(verdict, ReviewVerdict)
        assert not verdict.is_passed
        assert verdict.reason == "hardcoded secret detected"

    def test_extra_fields_ignored(self) -> None:
        verdict = parse_verdict('{"is_passed": true, "message": "fix: x", "suggestions": "more tests"}')
        assert isinstance(verdict, ReviewVerdict)

    def test_fenced_json(self) -> None:
        raw = 'Here you go:\n```json\n{"is_passed": true, "message": "chore: bump"}\n```'
        assert isinstance(parse_verdict(raw), ReviewVerdict)

    @pytest.mark.parametrize("raw", [
        "not json at all",
        "[1, 2, 3]",
        '{"reason": "missing is_passed"}',
        '{"is_passed": true, "message": ""}',
        '{"is_passed": 1, "message": "feat: x"}',
    ])
    def test_invalid(self, raw: str) -> None:
        result = parse_verdict(raw)
        assert isinstance(result, InvalidResponse)
        assert result.raw == raw
        assert result.detail


class TestComposeCommitMessage:
    def test_message_only(self) -> None:
        verdict = ReviewVerdict(is_passed=True, message="feat(auth): add token check\n")
        assert compose_commit_message(verdict) == "feat(auth): add token check"

    def test_reason_appended_as_comments(self) -> None:
        verdict = ReviewVerdict(is_passed=True, message="fix: x", reason="Consider a test.\n\nAlso docs.")
        assert compose_commit_message(verdict) == (
            "fix: x\n\n# AI review notes:\n# Consider a test.\n#\n# Also docs."
        )

    def test_reason_not_appended_when_disabled(self) -> None:
        verdict = ReviewVerdict(is_passed=True, message="fix: x", reason="note")
        assert compose_commit_message(verdict, append_reason=False) == "fix: x"


class TestReviewOutcome:
    @pytest.mark.parametrize("kind,code", [
        (OutcomeKind.SKIPPED, 0),
        (OutcomeKind.PASSED, 0),
        (OutcomeKind.FAILED, 1),
        (OutcomeKind.BUILD_FAILED, 1),
    ])
    def test_exit_codes(self, kind: OutcomeKind, code: int) -> None:
        assert ReviewOutcome(kind=kind).exit_code == code

    def test_skipped_factory(self) -> None:
        outcome = ReviewOutcome.skipped("merge commit")
        assert outcome.kind is OutcomeKind.SKIPPED
        assert outcome.reason == "merge commit"
