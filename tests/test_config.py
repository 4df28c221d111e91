"""Tests for suite loading and validation."""

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from detekt_verify.config import (
    CaseConfig,
    ExpectationConfig,
    KotlincConfig,
    load_config,
)


def _example_suites() -> list[Path]:
    repo_root = Path(__file__).resolve().parents[1]
    examples_dir = repo_root / "examples"
    return sorted(p for p in examples_dir.glob("*.yaml") if p.is_file())


@pytest.fixture()
def tmp_yaml(tmp_path):
    """Helper that writes YAML content to a temp file and returns its path."""

    def _write(content: str) -> Path:
        p = tmp_path / "suite.yaml"
        p.write_text(textwrap.dedent(content))
        return p

    return _write


def test_load_minimal_log_suite(tmp_yaml, tmp_path):
    path = tmp_yaml("""\
        cases:
          - name: captured
            log: logs/out.log
    """)
    cfg = load_config(path)
    assert cfg.kotlinc is None
    case = cfg.cases[0]
    assert case.name == "captured"
    assert case.log == str((tmp_path / "logs" / "out.log").resolve())
    assert case.sources is None
    assert case.exit_code == 0
    assert case.expect == ExpectationConfig()
    assert case.expect.compilation is True
    assert case.expect.detekt is None
    assert case.expect.violations is None
    assert case.expect.rules == []


def test_load_kotlinc_suite(tmp_yaml, tmp_path):
    path = tmp_yaml("""\
        kotlinc:
          executable: /opt/kotlinc/bin/kotlinc
          plugin_jar: build/plugin.jar
          plugin_options:
            debug: true
            config: detekt.yml
        cases:
          - name: hello
            sources: [src/hello.kt]
            timeout: 30
            expect:
              detekt: false
              violations: 1
              rules: [MagicNumber]
    """)
    cfg = load_config(path)
    assert cfg.kotlinc.executable == "/opt/kotlinc/bin/kotlinc"
    assert cfg.kotlinc.plugin_jar == str((tmp_path / "build" / "plugin.jar").resolve())
    assert cfg.kotlinc.plugin_options == {"debug": "true", "config": "detekt.yml"}
    case = cfg.cases[0]
    assert case.sources == [str((tmp_path / "src" / "hello.kt").resolve())]
    assert case.timeout == 30
    assert case.expect == ExpectationConfig(
        detekt=False, violations=1, rules=["MagicNumber"]
    )


def test_absolute_paths_untouched(tmp_yaml):
    path = tmp_yaml("""\
        cases:
          - name: captured
            log: /var/log/kotlinc.log
    """)
    assert load_config(path).cases[0].log == "/var/log/kotlinc.log"


def test_empty_cases_rejected(tmp_yaml):
    with pytest.raises(ValidationError, match="cases must not be empty"):
        load_config(tmp_yaml("cases: []\n"))


def test_empty_file_rejected(tmp_yaml):
    with pytest.raises(ValidationError):
        load_config(tmp_yaml(""))


def test_duplicate_case_names_rejected(tmp_yaml):
    path = tmp_yaml("""\
        cases:
          - name: a
            log: a.log
          - name: a
            log: b.log
    """)
    with pytest.raises(ValidationError, match="Duplicate case name 'a'"):
        load_config(path)


def test_sources_require_kotlinc(tmp_yaml):
    path = tmp_yaml("""\
        cases:
          - name: hello
            sources: [hello.kt]
    """)
    with pytest.raises(ValidationError, match="no 'kotlinc' section"):
        load_config(path)


def test_case_needs_exactly_one_input():
    with pytest.raises(ValidationError, match="exactly one of"):
        CaseConfig(name="neither")
    with pytest.raises(ValidationError, match="exactly one of"):
        CaseConfig(name="both", sources=["a.kt"], log="a.log")


def test_exit_code_only_for_logs():
    with pytest.raises(ValidationError, match="exit_code only applies"):
        CaseConfig(name="c", sources=["a.kt"], exit_code=1)
    assert CaseConfig(name="c", log="a.log", exit_code=1).exit_code == 1


def test_empty_sources_rejected():
    with pytest.raises(ValidationError, match="sources must not be empty"):
        CaseConfig(name="c", sources=[])


def test_negative_violation_count_rejected():
    with pytest.raises(ValidationError):
        ExpectationConfig(violations=-1)


def test_unknown_expectation_key_rejected():
    with pytest.raises(ValidationError):
        ExpectationConfig(warnings=2)


def test_kotlinc_env_missing_variables_listed(monkeypatch):
    monkeypatch.delenv("DV_MISSING_ONE", raising=False)
    monkeypatch.delenv("DV_MISSING_TWO", raising=False)
    with pytest.raises(ValidationError) as exc_info:
        KotlincConfig(env={"A": "${DV_MISSING_ONE}", "B": "${DV_MISSING_TWO}"})
    message = str(exc_info.value)
    assert "DV_MISSING_ONE" in message
    assert "DV_MISSING_TWO" in message


def test_kotlinc_env_resolution(monkeypatch):
    monkeypatch.setenv("DV_JAVA_HOME", "/opt/jdk")
    monkeypatch.delenv("DV_UNSET", raising=False)
    config = KotlincConfig(
        env={"JAVA_HOME": "${DV_JAVA_HOME}", "JAVA_OPTS": "${DV_UNSET:--Xmx1g}"}
    )
    assert config.resolved_env() == {"JAVA_HOME": "/opt/jdk", "JAVA_OPTS": "-Xmx1g"}


@pytest.mark.parametrize("suite_path", _example_suites(), ids=lambda p: p.name)
def test_example_suites_load(suite_path):
    cfg = load_config(suite_path)
    assert cfg.cases


@pytest.mark.parametrize("name", ["../escape", "a/b", "a\\b", "..", ".", " "])
def test_case_name_must_be_plain(name):
    with pytest.raises(ValidationError, match="without path separators"):
        CaseConfig(name=name, log="a.log")


def test_case_name_with_dots_allowed():
    assert CaseConfig(name="hello.kt-smoke", log="a.log").name == "hello.kt-smoke"
