"""Project configuration model and field resolution rules."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from .config import ScaffoldDefaults


class ProjectConfig(BaseModel):
    """Everything the generator needs to create one project.

    Immutable once built; every field is non-empty.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Project directory and display name")
    group_id: str = Field(..., min_length=1)
    artifact_id: str = Field(..., min_length=1)
    package_name: str = Field(..., min_length=1)
    build_type: str = Field(..., min_length=1, description="maven or gradle")
    language: str = Field(..., min_length=1)
    java_version: str = Field(..., min_length=1)
    boot_version: str = Field(..., min_length=1)
    packaging: str = Field(..., min_length=1)
    dependencies: str = Field(..., min_length=1, description="Comma-joined dependency ids")

    @classmethod
    def from_values(
        cls, values: Mapping[str, str | None], defaults: ScaffoldDefaults
    ) -> "ProjectConfig":
        """Resolve user answers against *defaults*.

        Blank or missing answers take the default; anything else is used
        verbatim. ``package_name`` falls back to ``group_id.artifact_id`` and
        ``name`` to ``artifact_id``, both computed from the resolved values.
        """
        resolved: dict[str, str] = {}
        for field in ("group_id", "artifact_id", "build_type", "language",
                      "java_version", "boot_version", "packaging", "dependencies"):
            resolved[field] = or_default(values.get(field), getattr(defaults, field))

        resolved["package_name"] = or_default(
            values.get("package_name"), derive_package_name(resolved["group_id"], resolved["artifact_id"])
        )
        resolved["name"] = or_default(values.get("name"), resolved["artifact_id"])
        return cls(**resolved)

    @property
    def source_dir(self) -> str:
        """Conventional source root relative to the project, e.g. ``src/main/java``."""
        return f"src/main/{self.language}"

    @property
    def build_output_dirs(self) -> list[str]:
        """Directories holding build output for this build type."""
        if self.build_type.startswith("gradle"):
            return ["build/", ".gradle/"]
        return ["target/"]


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def or_default(value: str | None, default: str) -> str:
    """Return *value* unchanged unless it is blank, in which case *default*."""
    return default if is_blank(value) else str(value)


def derive_package_name(group_id: str, artifact_id: str) -> str:
    return f"{group_id}.{artifact_id}"


# ---------------------------------------------------------------------------
# Field descriptors shared by the prompt chain and the form
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FormField:
    """One user-editable project field.

    ``default`` receives the defaults and the answers collected so far, so a
    field such as the package name can be pre-filled from earlier answers.
    """

    id: str
    label: str
    default: Callable[[ScaffoldDefaults, Mapping[str, str]], str]


PROJECT_FIELDS: tuple[FormField, ...] = (
    FormField("name", "Project Name",
              lambda d, v: v.get("artifact_id") or d.artifact_id),
    FormField("group_id", "Group ID", lambda d, v: d.group_id),
    FormField("artifact_id", "Artifact ID", lambda d, v: d.artifact_id),
    FormField("package_name", "Package Name",
              lambda d, v: derive_package_name(v.get("group_id") or d.group_id,
                                               v.get("artifact_id") or d.artifact_id)),
    FormField("build_type", "Build Type", lambda d, v: d.build_type),
    FormField("java_version", "Java Version", lambda d, v: d.java_version),
    FormField("boot_version", "Spring Boot Version", lambda d, v: d.boot_version),
)
