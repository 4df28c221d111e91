"""Assertion system for verifying detekt runs inside compiler output."""

from detekt_verify.assertions.base import AssertionResult
from detekt_verify.assertions.checks import evaluate_expectations
from detekt_verify.assertions.facade import CompilationAssert, assert_that

__all__ = [
    "AssertionResult",
    "CompilationAssert",
    "assert_that",
    "evaluate_expectations",
]
