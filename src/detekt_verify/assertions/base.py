"""Base data structures for the assertion system."""

from dataclasses import dataclass


@dataclass
class AssertionResult:
    """Result of evaluating a single expectation against a compiler run.

    Attributes:
        name: Identifier for the expectation (e.g. "rules:MagicNumber").
        passed: Whether the expectation held.
        message: Human-readable detail about the result. For failures this is
            the message of the raised VerificationFailure or parse error.
    """

    name: str
    passed: bool
    message: str
