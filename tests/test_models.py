"""Unit tests for ProjectConfig resolution (spring_scaffold.models)."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from spring_scaffold.config import ScaffoldDefaults
from spring_scaffold.models import (
    PROJECT_FIELDS,
    ProjectConfig,
    derive_package_name,
    is_blank,
    or_default,
)

DEFAULTED_FIELDS = [
    ("group_id", "com.example"),
    ("artifact_id", "demo"),
    ("build_type", "maven"),
    ("language", "java"),
    ("java_version", "21"),
    ("boot_version", "3.3.1.RELEASE"),
    ("packaging", "jar"),
    ("dependencies", "devtools,web,data-jpa,h2,thymeleaf"),
    ("package_name", "com.example.demo"),
    ("name", "demo"),
]


class TestBlankHandling:
    @pytest.mark.unit
    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
    def test_blank_values(self, value):
        assert is_blank(value) is True
        assert or_default(value, "fallback") == "fallback"

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["x", " padded ", "0"])
    def test_non_blank_kept_verbatim(self, value):
        assert or_default(value, "fallback") == value


class TestProjectConfigFromValues:
    @pytest.mark.unit
    @pytest.mark.parametrize("field,expected", DEFAULTED_FIELDS)
    def test_blank_field_takes_default(self, defaults, field, expected):
        config = ProjectConfig.from_values({field: "  "}, defaults)
        assert getattr(config, field) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize("field,_", DEFAULTED_FIELDS)
    def test_non_blank_field_used_unchanged(self, defaults, field, _):
        config = ProjectConfig.from_values({field: "Custom Value!"}, defaults)
        assert getattr(config, field) == "Custom Value!"

    @pytest.mark.unit
    def test_package_name_derivation(self, defaults):
        config = ProjectConfig.from_values(
            {"group_id": "com.example", "artifact_id": "demo"}, defaults
        )
        assert config.package_name == "com.example.demo"

    @pytest.mark.unit
    def test_package_name_follows_answers(self, defaults):
        config = ProjectConfig.from_values({"group_id": "org.acme", "artifact_id": "shop"}, defaults)
        assert config.package_name == "org.acme.shop"
        assert config.name == "shop"

    @pytest.mark.unit
    def test_explicit_package_name_wins(self, defaults):
        config = ProjectConfig.from_values(
            {"group_id": "org.acme", "artifact_id": "shop", "package_name": "org.acme.store"},
            defaults,
        )
        assert config.package_name == "org.acme.store"

    @pytest.mark.unit
    def test_custom_defaults(self):
        d = ScaffoldDefaults(java_version="17", build_type="gradle")
        config = ProjectConfig.from_values({}, d)
        assert config.java_version == "17"
        assert config.build_type == "gradle"

    @pytest.mark.unit
    def test_frozen(self, defaults):
        config = ProjectConfig.from_values({}, defaults)
        with pytest.raises(ValidationError):
            config.name = "other"

    @pytest.mark.unit
    def test_direct_construction_rejects_empty(self):
        with pytest.raises(ValidationError):
            ProjectConfig(
                name="", group_id="g", artifact_id="a", package_name="p", build_type="maven",
                language="java", java_version="21", boot_version="3.3.1", packaging="jar",
                dependencies="web",
            )


class TestDerivedPaths:
    @pytest.mark.unit
    def test_source_dir(self, defaults):
        assert ProjectConfig.from_values({}, defaults).source_dir == "src/main/java"
        kotlin = ProjectConfig.from_values({"language": "kotlin"}, defaults)
        assert kotlin.source_dir == "src/main/kotlin"

    @pytest.mark.unit
    def test_build_output_dirs(self, defaults):
        assert ProjectConfig.from_values({}, defaults).build_output_dirs == ["target/"]
        gradle = ProjectConfig.from_values({"build_type": "gradle"}, defaults)
        assert gradle.build_output_dirs == ["build/", ".gradle/"]


class TestProjectFields:
    @pytest.mark.unit
    def test_field_order(self):
        assert [f.id for f in PROJECT_FIELDS] == [
            "name", "group_id", "artifact_id", "package_name",
            "build_type", "java_version", "boot_version",
        ]

    @pytest.mark.unit
    def test_package_default_uses_earlier_answers(self, defaults):
        field = next(f for f in PROJECT_FIELDS if f.id == "package_name")
        assert field.default(defaults, {}) == "com.example.demo"
        assert field.default(defaults, {"group_id": "io.x", "artifact_id": "y"}) == "io.x.y"

    @pytest.mark.unit
    def test_derive_package_name(self):
        assert derive_package_name("com.example", "demo") == "com.example.demo"
