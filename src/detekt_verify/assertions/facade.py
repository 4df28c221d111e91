"""Fluent assertions over a compiler invocation that ran detekt.

Usage::

    assert_that(result).pass_compilation().pass_detekt(False).with_rule_violation(
        "MagicNumber"
    )
"""

from __future__ import annotations

from functools import cached_property

from detekt_verify.errors import (
    CompilationOutcomeMismatch,
    DetektStatusMismatch,
    MissingExpectedViolation,
    ViolationCountMismatch,
)
from detekt_verify.extractor import extract_run_block
from detekt_verify.invocation import ExitCode, InvocationResult
from detekt_verify.parser import AnalysisResult, parse, parse_status, parse_violations


def _format_list(values) -> str:
    return "[" + ", ".join(values) + "]"


class CompilationAssert:
    """Chainable checks; every method returns ``self`` or raises."""

    def __init__(self, result: InvocationResult):
        self._result = result
        self._block = tuple(extract_run_block(result.messages))
        self._violations = parse_violations(self._block)

    @property
    def result(self) -> InvocationResult:
        return self._result

    @property
    def block(self) -> tuple[str, ...]:
        return self._block

    @property
    def violations(self) -> tuple[str, ...]:
        return self._violations

    @cached_property
    def analysis(self) -> AnalysisResult:
        """Parsed detekt run. Raises MissingStatusLine if detekt never finished."""
        return parse(self._block)

    def pass_compilation(self, expect_success: bool = True) -> CompilationAssert:
        expected = ExitCode.OK if expect_success else ExitCode.COMPILATION_ERROR
        actual = self._result.exit_code
        if actual != expected:
            raise CompilationOutcomeMismatch(
                actual,
                expected,
                f"Expected compilation to finish with code {expected} but was {actual}",
            )
        return self

    def pass_detekt(self, expect_success: bool = True) -> CompilationAssert:
        status = parse_status(self._block)
        if status != expect_success:
            raise DetektStatusMismatch(
                status,
                expect_success,
                "Expected detekt to finish with success status: "
                f"{str(expect_success).lower()} but was {str(status).lower()}",
            )
        return self

    def with_no_violations(self) -> CompilationAssert:
        return self.with_violations(0)

    def with_violations(self, expected_count: int) -> CompilationAssert:
        actual = len(self._violations)
        if actual != expected_count:
            raise ViolationCountMismatch(
                actual,
                expected_count,
                f"Expected detekt violations to be {expected_count} but was {actual}",
            )
        return self

    def with_rule_violation(self, *expected_rule_names: str) -> CompilationAssert:
        missing = tuple(
            name for name in expected_rule_names if name not in self._violations
        )
        if missing:
            raise MissingExpectedViolation(
                self._violations,
                tuple(expected_rule_names),
                f"Expected rules {_format_list(expected_rule_names)} to raise a "
                "violation but not all were found. Found violations are instead "
                f"{_format_list(self._violations)}",
                missing=missing,
            )
        return self


def assert_that(result: InvocationResult) -> CompilationAssert:
    return CompilationAssert(result)
