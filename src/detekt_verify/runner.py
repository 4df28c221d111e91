from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from detekt_verify.assertions.checks import evaluate_expectations
from detekt_verify.config import CaseConfig, SuiteConfig
from detekt_verify.errors import AnalysisParseError
from detekt_verify.extractor import extract_run_block
from detekt_verify.kotlinc import compile_sources, get_kotlinc_version, load_captured_output
from detekt_verify.parser import parse_status, parse_violations
from detekt_verify.verbose import close_logger, setup_logger


class Runner:
    """Runs every case of a suite and writes junit.xml and meta.yaml."""

    def __init__(
        self,
        config: SuiteConfig,
        output_dir: Path,
        case_filter: str | None = None,
        verbose: bool = False,
        parallel: int = 1,
    ):
        self.config = config
        self.output_dir = output_dir
        self.case_filter = case_filter
        self.verbose = verbose
        self.parallel = parallel

    def execute(self) -> Path:
        """Run the selected cases. Returns the run directory."""
        cases = self.config.cases
        if self.case_filter:
            cases = [c for c in cases if c.name == self.case_filter]
            if not cases:
                raise ValueError(
                    f"Unknown case: {self.case_filter!r}. "
                    f"Available: {', '.join(c.name for c in self.config.cases)}"
                )

        run_id = datetime.now(timezone.utc).strftime("%Y-%m-%d_%H%M%S")
        run_dir = self.output_dir / run_id
        run_dir.mkdir(parents=True, exist_ok=True)

        logger = setup_logger(
            run_dir / "debug.log",
            verbose=self.verbose,
            logger_name=f"detekt_verify_{run_id}_{id(self)}",
        )
        logger.debug("Starting verification run")

        kotlinc_version = None
        if self.config.kotlinc is not None and any(c.sources for c in cases):
            kotlinc_version = get_kotlinc_version(self.config.kotlinc.executable)
            logger.debug(f"kotlinc version: {kotlinc_version or 'unknown'}")

        print(f"Running {len(cases)} case(s) with parallelism {self.parallel}...")

        results: dict[str, dict[str, Any]] = {}
        try:
            with ThreadPoolExecutor(max_workers=self.parallel) as executor:
                future_to_case = {
                    executor.submit(self._run_case, run_dir, case, logger): case.name
                    for case in cases
                }
                for completed, future in enumerate(as_completed(future_to_case), 1):
                    case_name = future_to_case[future]
                    try:
                        case_result = future.result()
                    except Exception as e:
                        print(
                            f"  [{completed}/{len(future_to_case)}] ERROR  {case_name}: {e}"
                        )
                        logger.error(f"Case '{case_name}' failed: {e}")
                        raise
                    results[case_name] = case_result
                    status = "PASS" if case_result["all_passed"] else "FAIL"
                    n_passed = sum(1 for a in case_result["assertions"] if a["passed"])
                    n_total = len(case_result["assertions"])
                    print(
                        f"  [{completed}/{len(future_to_case)}] {status}  {case_name} "
                        f"({n_passed}/{n_total} assertions)"
                    )

            # keep suite order in the report regardless of completion order
            ordered = {c.name: results[c.name] for c in cases}
            self._write_results(run_dir, ordered, kotlinc_version)
        finally:
            close_logger(logger)

        return run_dir

    def _write_results(
        self,
        run_dir: Path,
        results: dict[str, dict[str, Any]],
        kotlinc_version: str | None,
    ) -> None:
        """Write junit.xml and meta.yaml to the run directory."""
        from detekt_verify.reporting.junit import write_junit

        write_junit(run_dir, results)

        try:
            import importlib.metadata

            version = importlib.metadata.version("detekt-verify")
        except Exception:
            version = "unknown"

        meta: dict[str, Any] = {
            "run_id": run_dir.name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "cases": list(results.keys()),
            "passed": [name for name, r in results.items() if r["all_passed"]],
            "kotlinc_version": kotlinc_version,
            "detekt_verify_version": version,
        }
        (run_dir / "meta.yaml").write_text(yaml.dump(meta, default_flow_style=False))

    def _run_case(
        self, run_dir: Path, case: CaseConfig, logger: logging.Logger
    ) -> dict[str, Any]:
        """Run one case: obtain the compiler output, then evaluate expectations."""
        case_dir = run_dir / case.name
        case_dir.mkdir(parents=True, exist_ok=True)

        # note: logger name must be unique per case to avoid handler collision
        case_logger = setup_logger(
            debug_file=case_dir / "debug.log",
            verbose=self.verbose,
            logger_name=f"{logger.name}.{case.name}",
        )
        try:
            logger.debug(f"Running case '{case.name}'")

            if case.log is not None:
                case_logger.debug(f"Reading captured output from {case.log}")
                result = load_captured_output(Path(case.log), case.exit_code)
            else:
                if self.config.kotlinc is None or case.sources is None:
                    raise ValueError(
                        f"case '{case.name}' has no log and nothing to compile"
                    )
                result = compile_sources(
                    self.config.kotlinc,
                    case.sources,
                    workdir=case_dir,
                    timeout=case.timeout,
                    logger=case_logger,
                )

            (case_dir / "output.log").write_text(result.messages, encoding="utf-8")

            assertion_results = evaluate_expectations(result, case.expect, case_logger)

            block = extract_run_block(result.messages)
            violations = list(parse_violations(block))
            detekt_success: bool | None
            try:
                detekt_success = parse_status(block)
            except AnalysisParseError as e:
                case_logger.debug(f"No detekt result: {e}")
                detekt_success = None

            n_passed = sum(1 for ar in assertion_results if ar.passed)
            message = (
                f"Case '{case.name}' completed: "
                f"{n_passed}/{len(assertion_results)} assertions passed"
            )
            logger.debug(message)
            case_logger.debug(message)
        finally:
            close_logger(case_logger)

        return {
            "exit_code": str(result.exit_code),
            "duration_seconds": result.duration_seconds,
            "detekt_success": detekt_success,
            "violations": violations,
            "assertions": [
                {"name": ar.name, "passed": ar.passed, "message": ar.message}
                for ar in assertion_results
            ],
            "all_passed": all(ar.passed for ar in assertion_results),
        }
