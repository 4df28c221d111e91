"""Verify the output of kotlinc runs that execute the detekt compiler plugin."""

from detekt_verify.assertions import AssertionResult, CompilationAssert, assert_that
from detekt_verify.errors import (
    AnalysisParseError,
    CompilationOutcomeMismatch,
    DetektStatusMismatch,
    InvalidStatusToken,
    MissingExpectedViolation,
    MissingStatusLine,
    VerificationFailure,
    ViolationCountMismatch,
)
from detekt_verify.extractor import extract_run_block
from detekt_verify.invocation import ExitCode, InvocationResult
from detekt_verify.parser import AnalysisResult, parse

__all__ = [
    "AnalysisParseError",
    "AnalysisResult",
    "AssertionResult",
    "CompilationAssert",
    "CompilationOutcomeMismatch",
    "DetektStatusMismatch",
    "ExitCode",
    "InvalidStatusToken",
    "InvocationResult",
    "MissingExpectedViolation",
    "MissingStatusLine",
    "VerificationFailure",
    "ViolationCountMismatch",
    "assert_that",
    "extract_run_block",
    "parse",
]
