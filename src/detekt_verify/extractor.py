"""Locate the detekt run inside raw compiler output."""

from __future__ import annotations

RUN_START_MARKER = "Running detekt"
STATUS_MARKER = "Success?"


def extract_run_block(raw_output: str) -> list[str]:
    """Return the lines from the ``Running detekt`` marker to the status line.

    The status line is included. Without a start marker the block is empty;
    without a status line the block runs to the end of the output.
    """
    lines = [line.removesuffix("\r") for line in raw_output.split("\n")]

    start = next(
        (i for i, line in enumerate(lines) if RUN_START_MARKER in line), None
    )
    if start is None:
        return []
    lines = lines[start:]

    for end in range(len(lines) - 1, -1, -1):
        if STATUS_MARKER in lines[end]:
            return lines[: end + 1]
    return lines
