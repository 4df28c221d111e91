"""Failure types raised by the detekt assertion API."""

from __future__ import annotations

from typing import Any


class VerificationFailure(AssertionError):
    """A verification did not hold.

    Attributes:
        actual: The value observed in the compiler output.
        expected: The value the caller asked for.
        message: Human-readable description, also used as ``str(exc)``.
    """

    def __init__(self, actual: Any, expected: Any, message: str):
        super().__init__(message)
        self.actual = actual
        self.expected = expected
        self.message = message

    def __str__(self) -> str:
        return self.message


class CompilationOutcomeMismatch(VerificationFailure):
    pass


class DetektStatusMismatch(VerificationFailure):
    pass


class ViolationCountMismatch(VerificationFailure):
    pass


class MissingExpectedViolation(VerificationFailure):
    def __init__(
        self,
        actual: tuple[str, ...],
        expected: tuple[str, ...],
        message: str,
        missing: tuple[str, ...] = (),
    ):
        super().__init__(actual, expected, message)
        self.missing = missing


class AnalysisParseError(ValueError):
    """The detekt run in the compiler output could not be interpreted."""


class MissingStatusLine(AnalysisParseError):
    """No ``Success?`` line was found, so the detekt run never completed."""


class InvalidStatusToken(MissingStatusLine):
    """The ``Success?`` line does not end in ``true`` or ``false``."""

    def __init__(self, line: str):
        super().__init__(f"Status line does not end with true/false: {line!r}")
        self.line = line
