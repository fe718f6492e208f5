"""Spring Boot CLI process management.

Builds the ``spring init`` invocation from a :class:`ProjectConfig`, runs it
as a child process with buffered output, and reports a structured result.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ExecutableNotFoundError
from .models import ProjectConfig
from .utils import run_command
from .workspace import Workspace

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Structured result from one generator run."""

    success: bool
    exit_code: int = -1
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0
    command: list[str] = field(default_factory=list)
    project_root: Path | None = None

    def summary(self) -> str:
        """Return a human-readable summary of the result."""
        status = "[green]SUCCESS[/green]" if self.success else "[red]FAILED[/red]"
        lines = [
            f"Status: {status}",
            f"Exit code: {self.exit_code}",
            f"Duration: {self.duration_seconds:.1f}s",
        ]
        if not self.success and self.stderr:
            for line in self.stderr.splitlines()[:5]:
                lines.append(f"  {line[:200]}")
        return "\n".join(lines)


def build_invocation(config: ProjectConfig, binary: str = "spring") -> list[str]:
    """Return the generator argument list for *config*.

    The order is fixed: boot version, java version, build type, dependencies,
    group id, artifact id, name, package name, then the target directory.
    """
    return [
        binary,
        "init",
        f"--boot-version={config.boot_version}",
        f"--java-version={config.java_version}",
        f"--build={config.build_type}",
        f"--dependencies={config.dependencies}",
        f"--groupId={config.group_id}",
        f"--artifactId={config.artifact_id}",
        f"--name={config.name}",
        f"--package-name={config.package_name}",
        config.name,
    ]


class ProjectGenerator:
    """Runs the Spring Boot CLI to materialise a project.

    Args:
        workspace: Receives the progress notification.
        binary: Generator executable name or path (default: ``spring``).
        timeout_seconds: Kill the process after this long; ``None`` waits
            indefinitely.
    """

    def __init__(
        self,
        workspace: Workspace,
        binary: str = "spring",
        timeout_seconds: float | None = None,
    ) -> None:
        self.workspace = workspace
        self.binary = binary
        self.timeout_seconds = timeout_seconds

    def resolve_executable(self) -> str:
        """Return the absolute path of the generator.

        Raises:
            ExecutableNotFoundError: If the binary is not on ``PATH``.
        """
        path = shutil.which(self.binary)
        if path is None:
            raise ExecutableNotFoundError(self.binary)
        return path

    async def generate(
        self,
        config: ProjectConfig,
        cwd: str | Path | None = None,
        on_exit: Callable[[GenerationResult], None] | None = None,
    ) -> GenerationResult:
        """Create the project described by *config* under *cwd*.

        The executable is resolved before anything else, so a missing CLI
        never spawns a process. *on_exit* is called exactly once with the
        result once the child process has exited.

        Raises:
            ExecutableNotFoundError: If the generator cannot be found.
        """
        executable = self.resolve_executable()
        command = build_invocation(config, executable)
        base_dir = Path(cwd) if cwd else Path.cwd()

        self.workspace.notify("Creating project...")
        logger.info("Running %s in %s", " ".join(command), base_dir)

        start_time = time.monotonic()
        exit_code, stdout, stderr = await run_command(
            command, cwd=base_dir, timeout=self.timeout_seconds
        )
        elapsed = time.monotonic() - start_time

        result = GenerationResult(
            success=exit_code == 0,
            exit_code=exit_code,
            stdout=stdout,
            stderr=stderr,
            duration_seconds=elapsed,
            command=command,
            project_root=base_dir / config.name,
        )
        logger.debug("Generator finished: %s", result.summary())

        if on_exit is not None:
            on_exit(result)
        return result

    def generate_in_background(
        self,
        config: ProjectConfig,
        cwd: str | Path | None = None,
        on_exit: Callable[[GenerationResult], None] | None = None,
    ) -> asyncio.Task[GenerationResult]:
        """Start :meth:`generate` as a task and return without waiting.

        The executable check still happens immediately so a missing CLI is
        reported to the caller synchronously.
        """
        self.resolve_executable()
        return asyncio.create_task(self.generate(config, cwd=cwd, on_exit=on_exit))
