"""Run kotlinc with the detekt compiler plugin and capture its output."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import threading
import time
from pathlib import Path
from typing import Sequence

from detekt_verify.config import KotlincConfig
from detekt_verify.invocation import ExitCode, InvocationResult


def build_command(config: KotlincConfig, sources: Sequence[str]) -> list[str]:
    cmd = [config.executable, *sources]
    if config.plugin_jar:
        cmd.append(f"-Xplugin={config.plugin_jar}")
    for key, value in config.plugin_options.items():
        cmd.extend(["-P", f"plugin:{config.plugin_id}:{key}={value}"])
    cmd.extend(config.args)
    return cmd


def run_command_with_live_logging(
    cmd: list[str],
    workdir: Path,
    timeout: int,
    logger: logging.Logger,
    env: dict[str, str] | None = None,
) -> tuple[str, str, int, bool]:
    """Run cmd, logging each output line at DEBUG as it arrives.

    Returns (stdout, stderr, returncode, timed_out). On timeout the process is
    killed and the output collected so far is returned.
    """
    # Popen rather than run so lines reach the debug log while kotlinc runs
    proc = subprocess.Popen(
        cmd,
        cwd=workdir,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        env=env,
        # kotlinc is a shell wrapper around java; a new session lets a timeout
        # kill the JVM too, which otherwise keeps the pipes open
        start_new_session=True,
    )

    def _read(stream, lines: list[str], prefix: str) -> None:
        for line in stream:
            lines.append(line)
            logger.debug("[%s] %s", prefix, line.rstrip())

    stdout_lines: list[str] = []
    stderr_lines: list[str] = []
    t_out = threading.Thread(target=_read, args=(proc.stdout, stdout_lines, "stdout"))
    t_err = threading.Thread(target=_read, args=(proc.stderr, stderr_lines, "stderr"))
    t_out.start()
    t_err.start()

    timed_out = False
    try:
        proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        timed_out = True
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        proc.wait()

    t_out.join()
    t_err.join()

    return "".join(stdout_lines), "".join(stderr_lines), proc.returncode, timed_out


def compile_sources(
    config: KotlincConfig,
    sources: Sequence[str],
    workdir: Path,
    timeout: int,
    logger: logging.Logger,
) -> InvocationResult:
    """Compile sources with the plugin enabled and return the captured result."""
    cmd = build_command(config, sources)
    logger.debug(f"Running: {' '.join(cmd)}")

    env = {**os.environ, **config.resolved_env()} if config.env else None
    start = time.monotonic()
    try:
        stdout, stderr, returncode, timed_out = run_command_with_live_logging(
            cmd, workdir, timeout, logger, env=env
        )
    except FileNotFoundError:
        raise FileNotFoundError(
            f"kotlinc executable not found: {config.executable}"
        ) from None
    duration = time.monotonic() - start

    if timed_out:
        logger.warning(f"kotlinc timed out after {timeout}s")
        exit_code = ExitCode.INTERNAL_ERROR
    else:
        exit_code = ExitCode.from_returncode(returncode)
    logger.debug(f"kotlinc exited with {returncode} ({exit_code}) in {duration:.1f}s")

    return InvocationResult(
        exit_code=exit_code,
        messages=stdout + stderr,
        duration_seconds=duration,
        timed_out=timed_out,
    )


def load_captured_output(path: Path, exit_code: int = 0) -> InvocationResult:
    """Build an InvocationResult from output captured by another tool."""
    messages = path.read_text(encoding="utf-8", errors="replace")
    return InvocationResult(
        exit_code=ExitCode.from_returncode(exit_code), messages=messages
    )


def get_kotlinc_version(executable: str = "kotlinc") -> str | None:
    try:
        result = subprocess.run(
            [executable, "-version"], capture_output=True, text=True, timeout=30
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    # kotlinc prints "info: kotlinc-jvm 1.4.10 (JRE ...)" on stderr
    output = (result.stderr or result.stdout).strip()
    if result.returncode == 0 and output:
        return output.splitlines()[0]
    return None
