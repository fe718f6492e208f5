"""Shared helpers for spring-scaffold.

Child processes, the Rich console, and logging setup.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import NamedTuple

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

console = Console()

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Child processes
# ---------------------------------------------------------------------------


class ProcessOutput(NamedTuple):
    """Exit status and decoded output of a finished child process."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _text(data: bytes | None) -> str:
    return data.decode("utf-8", errors="replace").strip() if data else ""


async def run_command(
    argv: Sequence[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> ProcessOutput:
    """Spawn *argv* directly (no shell) and wait for it to exit.

    With ``capture=False`` the child shares this terminal, which is how the
    form editor runs. A child still alive after *timeout* seconds is killed
    and reported with return code ``-1``. *env* entries are layered over
    ``os.environ``.

    Raises:
        OSError: If the program cannot be started at all.
    """
    streams = asyncio.subprocess.PIPE if capture else None
    process = await asyncio.create_subprocess_exec(
        *argv,
        cwd=cwd,
        stdout=streams,
        stderr=streams,
        env={**os.environ, **env} if env else None,
    )
    try:
        out, err = await asyncio.wait_for(process.communicate(), timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        logger.warning("Killed %s after %ss", argv[0], timeout)
        return ProcessOutput(-1, stderr=f"{argv[0]} did not finish within {timeout}s")
    return ProcessOutput(process.returncode or 0, _text(out), _text(err))


# ---------------------------------------------------------------------------
# Rich output
# ---------------------------------------------------------------------------


def print_details(title: str, rows: Iterable[tuple[str, str]]) -> None:
    """Print label/value pairs inside a titled panel."""
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold cyan", no_wrap=True)
    grid.add_column()
    for label, value in rows:
        grid.add_row(label, value)
    console.print(Panel(grid, title=title, border_style="green", expand=False))


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def configure_logging(level: str | None = None) -> None:
    """Route the package loggers through Rich.

    The level comes from *level* or ``SPRING_SCAFFOLD_LOG_LEVEL`` and defaults
    to ``WARNING`` so normal runs only show the console messages.
    """
    name = (level or os.environ.get("SPRING_SCAFFOLD_LOG_LEVEL") or "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )
