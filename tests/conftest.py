"""Shared pytest fixtures for the spring-scaffold test suite.

Provides reusable fixtures for:
- A scripted in-memory workspace
- Sample Initializr metadata
- A fake ``spring`` executable on ``PATH``
"""

from __future__ import annotations

import os
import stat
import textwrap
from collections import deque
from pathlib import Path
from typing import Any

import pytest

from spring_scaffold.config import ScaffoldDefaults, ScaffoldSettings
from spring_scaffold.metadata_client import DependencyCatalog


# ---------------------------------------------------------------------------
# Workspace
# ---------------------------------------------------------------------------


class FakeWorkspace:
    """Workspace that replays scripted answers and records every call.

    ``answers`` feeds :meth:`prompt` (``None`` cancels), ``edited`` is what
    :meth:`edit` returns, and ``toggles`` feeds :meth:`choose_dependencies`
    (each item a list of ids, ``[]`` to submit, ``None`` to cancel). When a
    queue runs dry prompts accept the default and selectors submit.
    """

    def __init__(
        self,
        answers: list[str | None] | None = None,
        edited: str | None = "",
        toggles: list[list[str] | None] | None = None,
    ) -> None:
        self.answers: deque[str | None] = deque(answers or [])
        self.edited = edited
        self.toggles: deque[list[str] | None] = deque(toggles or [])
        self.prompts: list[tuple[str, str]] = []
        self.documents: list[str] = []
        self.notifications: list[tuple[str, str]] = []
        self.directories: list[Path] = []
        self.trees: list[tuple[Path, list[str], Path | None]] = []

    def notify(self, message: str, level: str = "info") -> None:
        self.notifications.append((level, message))

    async def prompt(self, label: str, default: str) -> str | None:
        self.prompts.append((label, default))
        if not self.answers:
            return ""
        return self.answers.popleft()

    async def edit(self, document: str, title: str) -> str | None:
        self.documents.append(document)
        if self.edited == "":
            return document
        return self.edited

    async def choose_dependencies(
        self, catalog: DependencyCatalog, selected: set[str]
    ) -> list[str] | None:
        if not self.toggles:
            return []
        return self.toggles.popleft()

    def change_directory(self, path: Path) -> None:
        self.directories.append(Path(path))

    def show_file_tree(
        self, root: Path, ignore_patterns: list[str], base: Path | None = None
    ) -> None:
        self.trees.append((Path(root), list(ignore_patterns), base))

    def messages(self, level: str) -> list[str]:
        return [message for lvl, message in self.notifications if lvl == level]


@pytest.fixture
def workspace() -> FakeWorkspace:
    return FakeWorkspace()


@pytest.fixture
def make_workspace() -> type[FakeWorkspace]:
    """The FakeWorkspace class, for tests that script their own answers."""
    return FakeWorkspace


@pytest.fixture
def defaults() -> ScaffoldDefaults:
    return ScaffoldDefaults()


@pytest.fixture
def settings() -> ScaffoldSettings:
    return ScaffoldSettings()


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_metadata() -> dict[str, Any]:
    """Trimmed-down ``/metadata/client`` document."""
    return {
        "_links": {"maven-project": {"href": "https://start.spring.io/starter.zip"}},
        "bootVersion": {"default": "3.3.1", "values": [{"id": "3.3.1", "name": "3.3.1"}]},
        "dependencies": {
            "type": "hierarchical-multi-select",
            "values": [
                {
                    "name": "Developer Tools",
                    "values": [
                        {
                            "id": "devtools",
                            "name": "Spring Boot DevTools",
                            "description": "Fast application restarts.",
                        },
                        {"id": "lombok", "name": "Lombok", "description": "Less boilerplate."},
                    ],
                },
                {
                    "name": "Web",
                    "values": [
                        {"id": "web", "name": "Spring Web", "description": "Build web apps."},
                        {"id": "webflux", "name": "Spring Reactive Web"},
                    ],
                },
                {
                    "name": "SQL",
                    "values": [
                        {"id": "data-jpa", "name": "Spring Data JPA"},
                        {"id": "h2", "name": "H2 Database"},
                    ],
                },
            ],
        },
    }


@pytest.fixture
def sample_catalog(sample_metadata: dict[str, Any]) -> DependencyCatalog:
    return DependencyCatalog.from_metadata(sample_metadata)


# ---------------------------------------------------------------------------
# Fake generator executable
# ---------------------------------------------------------------------------


def _write_script(path: Path, body: str) -> Path:
    path.write_text(body, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def fake_spring(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Install a ``spring`` script on ``PATH`` that mimics ``spring init``.

    It records its arguments to ``spring-args.txt`` and creates
    ``<name>/src/main/java/App.java`` plus a ``pom.xml``.
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    script = textwrap.dedent(
        """\
        #!/bin/sh
        printf '%s\\n' "$@" > "$(pwd)/spring-args.txt"
        for last; do :; done
        mkdir -p "$last/src/main/java"
        echo "class App {}" > "$last/src/main/java/App.java"
        echo "<project/>" > "$last/pom.xml"
        echo "Project extracted to '$last'"
        """
    )
    _write_script(bin_dir / "spring", script)
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    return bin_dir / "spring"


@pytest.fixture
def failing_spring(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Install a ``spring`` script on ``PATH`` that always exits with 1."""
    bin_dir = tmp_path / "bin-fail"
    bin_dir.mkdir()
    _write_script(bin_dir / "spring", "#!/bin/sh\necho 'Invalid dependency' >&2\nexit 1\n")
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    return bin_dir / "spring"
