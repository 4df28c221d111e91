"""Captured result of one compiler invocation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ExitCode(str, Enum):
    OK = "OK"
    COMPILATION_ERROR = "COMPILATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SCRIPT_EXECUTION_ERROR = "SCRIPT_EXECUTION_ERROR"

    @classmethod
    def from_returncode(cls, returncode: int) -> ExitCode:
        """Map a kotlinc process return code. Unknown codes are internal errors."""
        return _RETURNCODES.get(returncode, cls.INTERNAL_ERROR)

    def __str__(self) -> str:
        return self.value


_RETURNCODES: dict[int, ExitCode] = {
    0: ExitCode.OK,
    1: ExitCode.COMPILATION_ERROR,
    2: ExitCode.INTERNAL_ERROR,
    3: ExitCode.SCRIPT_EXECUTION_ERROR,
}


@dataclass(frozen=True)
class InvocationResult:
    exit_code: ExitCode
    messages: str
    duration_seconds: float = 0.0
    timed_out: bool = False
