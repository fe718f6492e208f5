"""User-facing workspace: prompts, notifications, and file presentation.

The scaffolding flow talks to the user only through the :class:`Workspace`
protocol. :class:`ConsoleWorkspace` implements it on top of Rich for terminal
use; tests substitute a scripted fake.
"""

from __future__ import annotations

import asyncio
import os
import re
import shlex
import tempfile
from pathlib import Path
from typing import Any, Literal, Protocol

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.tree import Tree

from .errors import EditorError
from .metadata_client import DependencyCatalog
from .utils import console as default_console
from .utils import run_command

Level = Literal["info", "success", "warning", "error"]

_LEVEL_STYLES: dict[str, str] = {
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
}


class Workspace(Protocol):
    """Capabilities the scaffolding flow needs from its host."""

    def notify(self, message: str, level: Level = "info") -> None: ...

    async def prompt(self, label: str, default: str) -> str | None:
        """Ask for one value; ``None`` means the user cancelled."""
        ...

    async def edit(self, document: str, title: str) -> str | None:
        """Let the user edit *document*; ``None`` means the edit was aborted."""
        ...

    async def choose_dependencies(
        self, catalog: DependencyCatalog, selected: set[str]
    ) -> list[str] | None:
        """Return ids to toggle, ``[]`` to submit, or ``None`` to cancel."""
        ...

    def change_directory(self, path: Path) -> None: ...

    def show_file_tree(
        self, root: Path, ignore_patterns: list[str], base: Path | None = None
    ) -> None:
        """List files under *root*, skipping paths (relative to *base*) that match."""
        ...


class ConsoleWorkspace:
    """Terminal implementation of :class:`Workspace` built on Rich."""

    def __init__(self, console: Console | None = None, editor: str | None = None) -> None:
        self.console = console or default_console
        self.editor = editor or os.environ.get("VISUAL") or os.environ.get("EDITOR") or "vi"

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def notify(self, message: str, level: Level = "info") -> None:
        style = _LEVEL_STYLES.get(level, "white")
        self.console.print(f"[{style}]{message}[/{style}]")

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    async def prompt(self, label: str, default: str) -> str | None:
        return await asyncio.to_thread(self._ask, label, default=default)

    def _ask(self, label: str, **kwargs: Any) -> str | None:
        """Blocking ``Prompt.ask``; run in a worker thread. ``None`` on EOF or Ctrl-C."""
        try:
            return Prompt.ask(label, console=self.console, **kwargs)
        except (EOFError, KeyboardInterrupt):
            return None

    async def edit(self, document: str, title: str) -> str | None:
        """Open *document* in ``$EDITOR`` and return the saved text.

        A non-zero editor exit status counts as an abort.

        Raises:
            EditorError: If the editor command cannot be parsed or started.
        """
        self.console.print(Panel(f"Editing [bold]{title}[/bold] in {self.editor}", style="cyan"))
        with tempfile.NamedTemporaryFile(
            "w", suffix=".txt", prefix="spring-scaffold-", delete=False, encoding="utf-8"
        ) as handle:
            handle.write(document)
            path = Path(handle.name)
        try:
            try:
                output = await run_command([*shlex.split(self.editor), str(path)], capture=False)
            except (OSError, ValueError) as exc:
                raise EditorError(self.editor, exc) from exc
            if not output.ok:
                return None
            return path.read_text(encoding="utf-8")
        finally:
            path.unlink(missing_ok=True)

    async def choose_dependencies(
        self, catalog: DependencyCatalog, selected: set[str]
    ) -> list[str] | None:
        """Show the catalog and read one line of toggles.

        Entries are addressed by number or id. A blank line submits, ``q``
        cancels.
        """
        numbered = self._render_catalog(catalog, selected)
        answer = await asyncio.to_thread(
            self._ask,
            "Toggle dependencies (numbers or ids, blank to submit, q to cancel)",
            default="",
            show_default=False,
        )
        if answer is None:
            return None

        answer = answer.strip()
        if answer.lower() == "q":
            return None
        toggles: list[str] = []
        for token in re.split(r"[\s,]+", answer):
            if not token:
                continue
            if token.isdigit() and 1 <= int(token) <= len(numbered):
                toggles.append(numbered[int(token) - 1])
            else:
                toggles.append(token)
        return toggles

    def _render_catalog(self, catalog: DependencyCatalog, selected: set[str]) -> list[str]:
        tree = Tree("[bold]Dependencies[/bold]")
        numbered: list[str] = []
        for group in catalog.groups:
            branch = tree.add(f"[bold cyan]{group.name}[/bold cyan]")
            for entry in group.values:
                numbered.append(entry.id)
                marker = "[green]*[/green] " if entry.id in selected else "  "
                label = f"{marker}{len(numbered):>3}. {entry.name or entry.id} [dim]({entry.id})[/dim]"
                if entry.description:
                    label += f" [dim]- {entry.description}[/dim]"
                branch.add(label)
        self.console.print(tree)
        return numbered

    # ------------------------------------------------------------------
    # Workspace navigation
    # ------------------------------------------------------------------

    def change_directory(self, path: Path) -> None:
        os.chdir(path)

    def show_file_tree(
        self, root: Path, ignore_patterns: list[str], base: Path | None = None
    ) -> None:
        """Print every file under *root* not matching *ignore_patterns*.

        Patterns are searched in each file's path relative to *base* (default
        *root*), so ``^target/`` can be anchored at the project root while the
        listing itself stays relative to *root*.
        """
        patterns = [re.compile(p) for p in ignore_patterns]
        anchor = base or root
        table = Table(title=str(root), show_header=True, header_style="bold cyan")
        table.add_column("File")
        if root.is_dir():
            for path in sorted(p for p in root.rglob("*") if p.is_file()):
                matched = path.relative_to(anchor).as_posix()
                if any(p.search(matched) for p in patterns):
                    continue
                table.add_row(path.relative_to(root).as_posix())
        self.console.print(table)
