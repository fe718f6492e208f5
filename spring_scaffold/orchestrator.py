"""spring-scaffold orchestrator.

Drives one "new project" session through its states::

    IDLE -> FETCHING_METADATA -> COLLECTING_PARAMETERS -> GENERATING -> DONE
                      \\                  \\                     \\
                       +------------------+---------------------+--> ERROR

Every session starts fresh at ``IDLE``; ``DONE`` and ``ERROR`` are terminal.
Failures are reported to the user once through the workspace and never
retried.

Usage::

    spring-scaffold new
    python -m spring_scaffold new
"""

from __future__ import annotations

import asyncio
import logging
import sys
from enum import Enum
from pathlib import Path

from .collector import ParameterCollector
from .config import ScaffoldSettings
from .errors import ConfigError, GenerationFailedError, ScaffoldError, SessionInProgressError
from .generator import GenerationResult, ProjectGenerator
from .hooks import PostGenerationHook
from .metadata_client import DependencyCatalog, MetadataClient
from .models import ProjectConfig
from .utils import configure_logging, print_details
from .workspace import ConsoleWorkspace, Workspace

logger = logging.getLogger(__name__)


class ScaffoldState(str, Enum):
    IDLE = "idle"
    FETCHING_METADATA = "fetching_metadata"
    COLLECTING_PARAMETERS = "collecting_parameters"
    GENERATING = "generating"
    DONE = "done"
    ERROR = "error"


class Orchestrator:
    """Coordinates metadata fetch, parameter collection, and generation.

    Attributes:
        settings: Immutable configuration shared by every session.
        workspace: User-facing collaborator (prompts, notifications, files).
        state: Current state of the latest session.
        history: States visited by the latest session, in order.
        config: Project configuration collected by the latest session.
        result: Generator result of the latest session, if it got that far.
        error: The error that ended the latest session, if any.
    """

    def __init__(
        self,
        settings: ScaffoldSettings,
        workspace: Workspace,
        client: MetadataClient | None = None,
        generator: ProjectGenerator | None = None,
        hook: PostGenerationHook | None = None,
        base_dir: Path | None = None,
    ) -> None:
        self.settings = settings
        self.workspace = workspace
        self.client = client or MetadataClient(
            url=settings.metadata_url,
            ttl=settings.cache_ttl,
            timeout=settings.fetch_timeout,
        )
        self.collector = ParameterCollector(
            workspace, settings.defaults, mode=settings.collection_mode
        )
        self.generator = generator or ProjectGenerator(
            workspace,
            binary=settings.generator_binary,
            timeout_seconds=settings.generator_timeout,
        )
        self.hook = hook or PostGenerationHook(workspace)
        self.base_dir = base_dir
        self._lock = asyncio.Lock()
        self._reset()

    def _reset(self) -> None:
        self.state = ScaffoldState.IDLE
        self.history: list[ScaffoldState] = [ScaffoldState.IDLE]
        self.config: ProjectConfig | None = None
        self.result: GenerationResult | None = None
        self.error: ScaffoldError | None = None

    def _transition(self, state: ScaffoldState) -> None:
        logger.debug("State %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _on_generation_exit(self, result: GenerationResult) -> None:
        self.result = result

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    async def run(self) -> ScaffoldState:
        """Run one scaffold session and return its terminal state."""
        if self.settings.single_session and self._lock.locked():
            self.workspace.notify(str(SessionInProgressError()), "error")
            return ScaffoldState.ERROR

        async with self._lock:
            self._reset()
            try:
                await self._run_session()
            except ScaffoldError as exc:
                self.error = exc
                self._transition(ScaffoldState.ERROR)
                self.workspace.notify(str(exc), "error")
            return self.state

    async def _run_session(self) -> None:
        self._transition(ScaffoldState.FETCHING_METADATA)
        metadata = await self.client.fetch()
        catalog = DependencyCatalog.from_metadata(metadata)

        self._transition(ScaffoldState.COLLECTING_PARAMETERS)
        self.config = await self.collector.collect(catalog)

        self._transition(ScaffoldState.GENERATING)
        base_dir = self.base_dir or Path.cwd()
        task = self.generator.generate_in_background(
            self.config, cwd=base_dir, on_exit=self._on_generation_exit
        )
        result = await task
        if not result.success:
            raise GenerationFailedError(result.exit_code, result.stderr)

        self.hook.run(self.config, base_dir)
        self._transition(ScaffoldState.DONE)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def summary_rows(config: ProjectConfig) -> list[tuple[str, str]]:
    """Label/value pairs describing a generated project."""
    return [
        ("Name", config.name),
        ("Package", config.package_name),
        ("Coordinates", f"{config.group_id}:{config.artifact_id}"),
        ("Build", f"{config.build_type} / {config.language} {config.java_version}"),
        ("Spring Boot", config.boot_version),
        ("Dependencies", config.dependencies.replace(",", ", ")),
    ]


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``spring-scaffold``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="spring-scaffold",
        description="Create a new Spring Boot project with the Spring Boot CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Configuration comes from the environment:\n"
            "  SPRING_SCAFFOLD_CONFIG          JSON settings file\n"
            "  SPRING_SCAFFOLD_GENERATOR       generator executable (default: spring)\n"
            "  SPRING_SCAFFOLD_COLLECTION_MODE prompts | form\n"
            "  SPRING_SCAFFOLD_LOG_LEVEL       DEBUG, INFO, WARNING, ...\n"
        ),
    )
    subcommands = parser.add_subparsers(dest="command", required=True)
    subcommands.add_parser("new", help="Create a new project")
    parser.parse_args(argv)

    configure_logging()
    workspace = ConsoleWorkspace()
    try:
        settings = ScaffoldSettings.from_env()
    except ConfigError as exc:
        workspace.notify(str(exc), "error")
        sys.exit(1)
    orchestrator = Orchestrator(settings, workspace)
    state = asyncio.run(orchestrator.run())

    if state is ScaffoldState.DONE and orchestrator.config is not None:
        print_details("New Project", summary_rows(orchestrator.config))
    else:
        sys.exit(1)


if __name__ == "__main__":
    main()
