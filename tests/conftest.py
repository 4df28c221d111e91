"""Pytest configuration and fixtures."""

import logging

import pytest

from detekt_verify.invocation import ExitCode, InvocationResult

ESC = "\u001b"

MAGIC_NUMBER_OUTPUT = (
    "noise\n"
    "Running detekt\n"
    f"\t{ESC}[33mMagicNumber - [x] at hello.kt\n"
    "i: Success?: false\n"
    "more noise"
)

CLEAN_OUTPUT = "warning: something\nRunning detekt\ni: Success?: true\n"


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Clean up detekt_verify loggers after each test to prevent name collisions."""
    yield

    loggers_to_remove = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("detekt_verify")
    ]

    for name in loggers_to_remove:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        del logging.Logger.manager.loggerDict[name]


@pytest.fixture
def test_logger():
    logger = logging.getLogger("detekt_verify_tests")
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture
def magic_number_output() -> str:
    return MAGIC_NUMBER_OUTPUT


@pytest.fixture
def magic_number_result() -> InvocationResult:
    return InvocationResult(exit_code=ExitCode.OK, messages=MAGIC_NUMBER_OUTPUT)


@pytest.fixture
def clean_result() -> InvocationResult:
    return InvocationResult(exit_code=ExitCode.OK, messages=CLEAN_OUTPUT)
