"""spring-scaffold configuration.

Typed, immutable configuration for the scaffolding flow. All settings use
Pydantic v2 models so they are validated at construction time and can be
loaded from JSON or environment variables. A ``ScaffoldSettings`` instance is
built once at startup and passed by reference into the orchestrator.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError

SPRING_METADATA_URL = "https://start.spring.io/metadata/client"


class ScaffoldDefaults(BaseModel):
    """Fallback values for every configurable project field.

    A blank answer to any prompt is replaced by the matching value here.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    build_type: str = Field(default="maven", min_length=1)
    language: str = Field(default="java", min_length=1)
    java_version: str = Field(default="21", min_length=1)
    boot_version: str = Field(default="3.3.1.RELEASE", min_length=1)
    packaging: str = Field(default="jar", min_length=1)
    dependencies: str = Field(default="devtools,web,data-jpa,h2,thymeleaf", min_length=1)
    group_id: str = Field(default="com.example", min_length=1)
    artifact_id: str = Field(default="demo", min_length=1)

    @property
    def package_name(self) -> str:
        """Package name derived from the default group and artifact ids."""
        return f"{self.group_id}.{self.artifact_id}"


class ScaffoldSettings(BaseModel):
    """Global spring-scaffold configuration.

    Holds the project defaults plus the knobs for the metadata fetch and the
    generator process.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    defaults: ScaffoldDefaults = Field(default_factory=ScaffoldDefaults)
    metadata_url: str = Field(default=SPRING_METADATA_URL)
    cache_ttl: float = Field(default=3600.0, gt=0, description="Metadata cache lifetime in seconds")
    fetch_timeout: float | None = Field(
        default=30.0, description="Metadata request timeout in seconds (None = unbounded)"
    )
    generator_binary: str = Field(default="spring", min_length=1)
    generator_timeout: float | None = Field(
        default=None, description="Generator process timeout in seconds (None = unbounded)"
    )
    collection_mode: Literal["prompts", "form"] = Field(default="prompts")
    single_session: bool = Field(
        default=True,
        description="Reject a new session while another one is running (False queues it instead)",
    )

    # ------------------------------------------------------------------
    # Overrides
    # ------------------------------------------------------------------

    def with_overrides(self, overrides: dict[str, Any] | None) -> "ScaffoldSettings":
        """Return a new settings object with *overrides* deep-merged on top.

        Nested mappings (e.g. ``{"defaults": {"java_version": "17"}}``) are
        merged key by key; any other value replaces the current one. The
        result is validated again, so unknown keys are rejected.
        """
        if not overrides:
            return self
        merged = deep_merge(self.model_dump(), overrides)
        return type(self).model_validate(merged)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the settings to a JSON file and return its path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ScaffoldSettings":
        """Load settings previously written by :meth:`save` (or by hand)."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls, base: "ScaffoldSettings | None" = None) -> "ScaffoldSettings":
        """Build settings from environment variables.

        Recognised variables (all optional):
            SPRING_SCAFFOLD_CONFIG, SPRING_SCAFFOLD_METADATA_URL,
            SPRING_SCAFFOLD_GENERATOR, SPRING_SCAFFOLD_CACHE_TTL,
            SPRING_SCAFFOLD_FETCH_TIMEOUT, SPRING_SCAFFOLD_COLLECTION_MODE.

        ``SPRING_SCAFFOLD_CONFIG`` points at a JSON file whose keys are
        deep-merged onto *base* (or the defaults); the remaining variables
        are applied on top of that.

        Raises:
            ConfigError: If the settings file cannot be read, a number does
                not parse, or the merged result fails validation.
        """
        overrides: dict[str, Any] = {}
        config_file = os.environ.get("SPRING_SCAFFOLD_CONFIG")
        if config_file:
            overrides = _read_settings_file(Path(config_file))

        for variable, key in _STRING_VARIABLES.items():
            if os.environ.get(variable):
                overrides[key] = os.environ[variable]
        for variable, key in _SECONDS_VARIABLES.items():
            if os.environ.get(variable):
                overrides[key] = _parse_seconds(variable, os.environ[variable])

        try:
            return (base or cls()).with_overrides(overrides)
        except ValidationError as exc:
            raise ConfigError(_describe(exc)) from exc


_STRING_VARIABLES = {
    "SPRING_SCAFFOLD_METADATA_URL": "metadata_url",
    "SPRING_SCAFFOLD_GENERATOR": "generator_binary",
    "SPRING_SCAFFOLD_COLLECTION_MODE": "collection_mode",
}

_SECONDS_VARIABLES = {
    "SPRING_SCAFFOLD_CACHE_TTL": "cache_ttl",
    "SPRING_SCAFFOLD_FETCH_TIMEOUT": "fetch_timeout",
}


def _read_settings_file(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"cannot read {path}: {exc.strerror or exc}") from exc
    except ValueError as exc:
        raise ConfigError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    return data


def _parse_seconds(variable: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{variable} must be a number of seconds, got {raw!r}") from exc


def _describe(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "settings"
        problems.append(f"{location}: {error['msg']}")
    return "; ".join(problems)


def deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *overrides* into a copy of *base*; overrides win."""
    result = dict(base)
    for key, value in overrides.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value)
        else:
            result[key] = value
    return result
