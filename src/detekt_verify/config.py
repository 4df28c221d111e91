from __future__ import annotations

from pathlib import Path

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class KotlincConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    executable: str = "kotlinc"
    plugin_jar: str | None = None
    plugin_id: str = "detekt-compiler-plugin"
    plugin_options: dict[str, str] = {}
    args: list[str] = []
    env: dict[str, str] = {}

    @field_validator("plugin_options", mode="before")
    @classmethod
    def stringify_option_values(cls, v: dict) -> dict:
        # YAML reads `debug: true` as a bool; kotlinc expects the literal text
        if not isinstance(v, dict):
            return v
        return {
            key: str(value).lower() if isinstance(value, bool) else str(value)
            for key, value in v.items()
        }

    @model_validator(mode="after")
    def validate_env_variables(self) -> "KotlincConfig":
        """Validate that all ${VAR} references without defaults are set.

        Raises ValueError listing every missing variable so the user can fix them
        all at once rather than hitting them one-by-one mid-run.
        """
        missing: list[str] = []
        for key, value in self.env.items():
            try:
                expandvars(value, nounset=True)
            except Exception:
                missing.append(f"  {key}={value}")

        if missing:
            details = "\n".join(missing)
            raise ValueError(f"kotlinc has missing environment variables:\n{details}")

        return self

    def resolved_env(self) -> dict[str, str]:
        return {key: expandvars(value) for key, value in self.env.items()}


class ExpectationConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    compilation: bool = True
    detekt: bool | None = None
    violations: int | None = Field(default=None, ge=0)
    rules: list[str] = []


class CaseConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    sources: list[str] | None = None
    log: str | None = None
    exit_code: int = 0
    timeout: int = 120
    expect: ExpectationConfig = ExpectationConfig()

    @field_validator("name")
    @classmethod
    def name_is_directory_safe(cls, v: str) -> str:
        # used as the case directory name inside the run directory
        if not v.strip() or v in {".", ".."} or "/" in v or "\\" in v:
            raise ValueError(
                f"Case name '{v}' must be a plain name without path separators"
            )
        return v

    @model_validator(mode="after")
    def exactly_one_input(self) -> CaseConfig:
        if (self.sources is None) == (self.log is None):
            raise ValueError(
                f"case '{self.name}' must set exactly one of 'sources' or 'log'"
            )
        if self.sources is not None and not self.sources:
            raise ValueError(f"case '{self.name}' sources must not be empty")
        if self.sources is not None and "exit_code" in self.model_fields_set:
            raise ValueError(
                f"case '{self.name}': exit_code only applies to captured logs"
            )
        return self


class SuiteConfig(BaseModel):
    kotlinc: KotlincConfig | None = None
    cases: list[CaseConfig]

    @field_validator("cases")
    @classmethod
    def unique_case_names(cls, v: list[CaseConfig]) -> list[CaseConfig]:
        if not v:
            raise ValueError("cases must not be empty")
        seen: set[str] = set()
        for case in v:
            if case.name in seen:
                raise ValueError(f"Duplicate case name '{case.name}'")
            seen.add(case.name)
        return v

    @model_validator(mode="after")
    def compiled_cases_need_kotlinc(self) -> SuiteConfig:
        if self.kotlinc is None:
            compiled = [c.name for c in self.cases if c.sources is not None]
            if compiled:
                raise ValueError(
                    f"cases {', '.join(compiled)} compile sources but no "
                    "'kotlinc' section is configured"
                )
        return self


def _resolve(path: str, base: Path) -> str:
    p = Path(path)
    if p.is_absolute():
        return path
    return str((base / p).resolve())


def load_config(path: Path) -> SuiteConfig:
    """Load and validate a verification suite from a YAML file."""
    config_dir = path.parent.resolve()

    with open(path) as f:
        raw = yaml.safe_load(f)

    config = SuiteConfig(**(raw or {}))

    # Resolve relative paths relative to the suite file location
    if config.kotlinc is not None and config.kotlinc.plugin_jar:
        config.kotlinc.plugin_jar = _resolve(config.kotlinc.plugin_jar, config_dir)
    for case in config.cases:
        if case.sources is not None:
            case.sources = [_resolve(s, config_dir) for s in case.sources]
        if case.log is not None:
            case.log = _resolve(case.log, config_dir)

    return config
