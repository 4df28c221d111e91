"""Turn an extracted detekt run block into an AnalysisResult."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from detekt_verify.errors import InvalidStatusToken, MissingStatusLine
from detekt_verify.extractor import STATUS_MARKER

# detekt prints each finding indented with a tab and coloured yellow
VIOLATION_INDENT = "\t"
VIOLATION_PREFIX = VIOLATION_INDENT + "\u001b[33m"

_BOOLEAN_TOKENS = {"true": True, "false": False}


@dataclass(frozen=True)
class AnalysisResult:
    success: bool
    violations: tuple[str, ...] = ()


def find_status_line(block: Iterable[str]) -> str:
    for line in block:
        if STATUS_MARKER in line:
            return line
    raise MissingStatusLine(
        f"No '{STATUS_MARKER}' line found: detekt did not report a result"
    )


def parse_status(block: Iterable[str]) -> bool:
    """Read the success flag from the status line, e.g. ``i: Success?: false``."""
    line = find_status_line(block)
    tokens = line.split()
    if not tokens or tokens[-1] not in _BOOLEAN_TOKENS:
        raise InvalidStatusToken(line)
    return _BOOLEAN_TOKENS[tokens[-1]]


def parse_violations(block: Iterable[str]) -> tuple[str, ...]:
    """Collect rule ids from indented finding lines, in order, duplicates kept."""
    violations: list[str] = []
    for line in block:
        if not line.startswith(VIOLATION_INDENT):
            continue
        if line.startswith(VIOLATION_PREFIX):
            body = line[len(VIOLATION_PREFIX) :]
        else:
            body = line[len(VIOLATION_INDENT) :]
        tokens = body.split()
        if tokens:
            violations.append(tokens[0])
    return tuple(violations)


def parse(block: Sequence[str]) -> AnalysisResult:
    return AnalysisResult(
        success=parse_status(block),
        violations=parse_violations(block),
    )
