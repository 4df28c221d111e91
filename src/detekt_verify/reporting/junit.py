from __future__ import annotations

from pathlib import Path
from typing import Any

from junitparser import Failure, JUnitXml, TestCase, TestSuite


def write_junit(run_dir: Path, results: dict[str, dict[str, Any]]) -> Path:
    """Write junit.xml from per-case results dict, return path."""
    xml = JUnitXml()

    for case_name, case_result in results.items():
        suite = TestSuite(case_name)

        suite.add_property("exit_code", str(case_result.get("exit_code")))
        detekt_success = case_result.get("detekt_success")
        if detekt_success is not None:
            suite.add_property("detekt_success", str(detekt_success).lower())
        suite.add_property("violations", ",".join(case_result.get("violations", [])))

        # Test cases: one per assertion
        for assertion in case_result.get("assertions", []):
            case = TestCase(assertion["name"])
            case.classname = case_name
            if not assertion.get("passed", True):
                case.result = [Failure(assertion.get("message", ""))]
            suite.add_testcase(case)

        # Set time after add_testcase (add_testcase resets it via update_statistics)
        suite.time = float(case_result.get("duration_seconds") or 0.0)

        # Use append (not +=) to preserve properties and time
        xml.append(suite)

    junit_path = run_dir / "junit.xml"
    xml.write(str(junit_path), pretty=True)
    return junit_path


def has_failures(junit_path: Path) -> bool:
    xml = JUnitXml.fromfile(str(junit_path))
    return any(suite.failures > 0 or suite.errors > 0 for suite in xml)
