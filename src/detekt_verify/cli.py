from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

import typer
import yaml

app = typer.Typer(name="detekt-verify", help="Verify detekt runs in kotlinc output")


class DetektStatus(str, Enum):
    TRUE = "true"
    FALSE = "false"


def _quiet_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


@app.command()
def check(
    log: str = typer.Argument(help="Captured compiler output to verify"),
    exit_code: int = typer.Option(
        0, "--exit-code", help="Process exit code of the captured invocation"
    ),
    compilation: bool = typer.Option(
        True, "--compilation/--no-compilation", help="Expect compilation to succeed"
    ),
    detekt: DetektStatus | None = typer.Option(
        None, "--detekt", help="Expected detekt success status"
    ),
    violations: int | None = typer.Option(
        None, "--violations", min=0, help="Expected number of violations"
    ),
    rules: list[str] | None = typer.Option(
        None, "--rule", help="Rule expected to be violated (repeatable)"
    ),
    debug_log: str | None = typer.Option(
        None, "--debug-log", help="Write debug output to this file"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
):
    """Check one captured compiler output against the given expectations."""
    from detekt_verify.assertions.checks import evaluate_expectations
    from detekt_verify.config import ExpectationConfig
    from detekt_verify.kotlinc import load_captured_output
    from detekt_verify.verbose import close_logger, setup_logger

    log_path = Path(log)
    if not log_path.exists():
        typer.echo(f"Error: log file not found: {log}", err=True)
        raise typer.Exit(1)

    if debug_log:
        logger = setup_logger(
            Path(debug_log), verbose=verbose, logger_name="detekt_verify_check"
        )
    else:
        logger = _quiet_logger("detekt_verify_check_quiet")

    expect = ExpectationConfig(
        compilation=compilation,
        detekt=None if detekt is None else detekt == DetektStatus.TRUE,
        violations=violations,
        rules=rules or [],
    )
    try:
        result = load_captured_output(log_path, exit_code)
        assertion_results = evaluate_expectations(result, expect, logger)
    finally:
        if debug_log:
            close_logger(logger)

    for ar in assertion_results:
        status = "PASS" if ar.passed else "FAIL"
        typer.echo(f"{status}  {ar.name}: {ar.message}")

    if not all(ar.passed for ar in assertion_results):
        raise typer.Exit(1)


@app.command()
def parse(
    log: str = typer.Argument(help="Captured compiler output to parse"),
):
    """Print the detekt result found in a captured compiler output."""
    from detekt_verify.errors import AnalysisParseError
    from detekt_verify.extractor import extract_run_block
    from detekt_verify.parser import parse as parse_block

    log_path = Path(log)
    if not log_path.exists():
        typer.echo(f"Error: log file not found: {log}", err=True)
        raise typer.Exit(1)

    block = extract_run_block(log_path.read_text(encoding="utf-8", errors="replace"))
    try:
        analysis = parse_block(block)
    except AnalysisParseError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(
        yaml.dump(
            {"success": analysis.success, "violations": list(analysis.violations)},
            default_flow_style=False,
            sort_keys=False,
        ).rstrip()
    )


@app.command()
def run(
    suite: str = typer.Argument(help="Path to verification suite YAML"),
    case: str | None = typer.Option(None, help="Run only this case"),
    output_dir: str = typer.Option("runs", help="Output directory for run results"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
    parallel: int = typer.Option(
        1, "--parallel", "-p", min=1, max=100, help="Number of cases to run at once"
    ),
):
    """Run every case of a verification suite."""
    from pydantic import ValidationError

    from detekt_verify.config import load_config
    from detekt_verify.reporting.junit import has_failures
    from detekt_verify.runner import Runner

    suite_path = Path(suite)
    if not suite_path.exists():
        typer.echo(f"Error: suite file not found: {suite}", err=True)
        raise typer.Exit(1)

    try:
        suite_config = load_config(suite_path)
    except (ValidationError, yaml.YAMLError) as e:
        typer.echo(f"Error: invalid suite {suite}:\n{e}", err=True)
        raise typer.Exit(1)

    runner = Runner(
        config=suite_config,
        output_dir=Path(output_dir),
        case_filter=case,
        verbose=verbose,
        parallel=parallel,
    )

    try:
        run_dir = runner.execute()
    except (ValueError, FileNotFoundError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Run complete: {run_dir}")
    typer.echo(f"Report: {run_dir / 'junit.xml'}")
    if not verbose:
        typer.echo(f"Debug log: {run_dir / 'debug.log'}")

    if has_failures(run_dir / "junit.xml"):
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
