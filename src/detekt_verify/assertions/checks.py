"""Evaluate declarative expectations into AssertionResult records."""

from __future__ import annotations

import logging
from typing import Callable

from detekt_verify.assertions.base import AssertionResult
from detekt_verify.assertions.facade import CompilationAssert
from detekt_verify.config import ExpectationConfig
from detekt_verify.errors import AnalysisParseError, VerificationFailure
from detekt_verify.invocation import InvocationResult


def _check(
    name: str, check: Callable[[], object], passed_message: str, logger: logging.Logger
) -> AssertionResult:
    logger.info(f"Checking {name}")
    try:
        check()
    except VerificationFailure as e:
        logger.info(f"{name} failed: actual={e.actual!r} expected={e.expected!r}")
        return AssertionResult(name=name, passed=False, message=e.message)
    except AnalysisParseError as e:
        logger.warning(f"{name} could not be evaluated: {e}")
        return AssertionResult(name=name, passed=False, message=str(e))
    logger.info(f"{name} passed")
    return AssertionResult(name=name, passed=True, message=passed_message)


def evaluate_expectations(
    result: InvocationResult, expect: ExpectationConfig, logger: logging.Logger
) -> list[AssertionResult]:
    """Run every declared expectation; a failing one does not stop the others."""
    facade = CompilationAssert(result)
    results: list[AssertionResult] = []

    outcome = "ok" if expect.compilation else "compilation_error"
    results.append(
        _check(
            f"compilation:{outcome}",
            lambda: facade.pass_compilation(expect.compilation),
            f"compilation finished with code {result.exit_code}",
            logger,
        )
    )

    if expect.detekt is not None:
        detekt = str(expect.detekt).lower()
        results.append(
            _check(
                f"detekt:{detekt}",
                lambda: facade.pass_detekt(expect.detekt),
                f"detekt finished with success status: {detekt}",
                logger,
            )
        )

    if expect.violations is not None:
        results.append(
            _check(
                f"violations:{expect.violations}",
                lambda: facade.with_violations(expect.violations),
                f"{len(facade.violations)} violation(s) reported",
                logger,
            )
        )

    if expect.rules:
        results.append(
            _check(
                f"rules:{','.join(expect.rules)}",
                lambda: facade.with_rule_violation(*expect.rules),
                f"all of {', '.join(expect.rules)} reported",
                logger,
            )
        )

    return results
