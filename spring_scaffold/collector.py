"""Parameter collection: prompt chain, structured form, dependency selector.

Each strategy turns user input into a :class:`ProjectConfig`. Blank answers
fall back to the configured defaults; cancelling any step raises
:class:`CancelledByUser` and nothing is passed downstream.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .config import ScaffoldDefaults
from .errors import CancelledByUser
from .metadata_client import DependencyCatalog
from .models import PROJECT_FIELDS, FormField, ProjectConfig, or_default
from .workspace import Workspace

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Sequential prompt chain
# ---------------------------------------------------------------------------


class PromptChain:
    """Ask for one field at a time, each pre-filled with its default."""

    def __init__(
        self,
        workspace: Workspace,
        defaults: ScaffoldDefaults,
        fields: Sequence[FormField] = PROJECT_FIELDS,
    ) -> None:
        self.workspace = workspace
        self.defaults = defaults
        self.fields = fields

    async def run(self) -> dict[str, str]:
        """Return the answers keyed by field id, defaults already applied."""
        answers: dict[str, str] = {}
        for field in self.fields:
            default = field.default(self.defaults, answers)
            value = await self.workspace.prompt(field.label, default)
            if value is None:
                raise CancelledByUser(field.label)
            answers[field.id] = or_default(value, default)
        return answers


# ---------------------------------------------------------------------------
# Structured form
# ---------------------------------------------------------------------------


class ProjectForm:
    """Present every field at once as an editable ``Label: value`` document."""

    title = "Project Details"

    def __init__(
        self,
        workspace: Workspace,
        defaults: ScaffoldDefaults,
        fields: Sequence[FormField] = PROJECT_FIELDS,
    ) -> None:
        self.workspace = workspace
        self.defaults = defaults
        self.fields = fields

    def render(self) -> str:
        lines = [
            "# Edit the values below and save. Blank values use the default.",
            "# Exit the editor with an error status to cancel.",
        ]
        for field in self.fields:
            lines.append(f"{field.label}: {field.default(self.defaults, {})}")
        return "\n".join(lines) + "\n"

    def parse(self, document: str) -> dict[str, str]:
        """Read the edited document back into answers.

        Unknown labels and comment lines are ignored. Missing or blank values
        take the default computed from the answers above them.
        """
        by_label = {field.label.lower(): field for field in self.fields}
        raw: dict[str, str] = {}
        for line in document.splitlines():
            if not line.strip() or line.lstrip().startswith("#") or ":" not in line:
                continue
            label, _, value = line.partition(":")
            field = by_label.get(label.strip().lower())
            if field is not None:
                raw[field.id] = value.strip()

        answers: dict[str, str] = {}
        for field in self.fields:
            answers[field.id] = or_default(raw.get(field.id), field.default(self.defaults, answers))
        return answers

    async def run(self) -> dict[str, str]:
        edited = await self.workspace.edit(self.render(), self.title)
        if edited is None:
            raise CancelledByUser(self.title)
        return self.parse(edited)


# ---------------------------------------------------------------------------
# Dependency selector
# ---------------------------------------------------------------------------


class DependencySelector:
    """Toggle dependencies from the catalog on and off.

    The selection is a set; ``submit`` joins it in catalog order, or returns
    *default* when nothing is selected.
    """

    def __init__(self, catalog: DependencyCatalog, default: str) -> None:
        self.catalog = catalog
        self.default = default
        self.selected: set[str] = set()

    def toggle(self, dependency_id: str) -> bool:
        """Flip *dependency_id*; return whether it is now selected."""
        if dependency_id in self.selected:
            self.selected.discard(dependency_id)
            return False
        self.selected.add(dependency_id)
        return True

    def submit(self) -> str:
        if not self.selected:
            return self.default
        order = {dep_id: index for index, dep_id in enumerate(self.catalog.ids())}
        ordered = sorted(self.selected, key=lambda dep_id: (order.get(dep_id, len(order)), dep_id))
        return ",".join(ordered)

    async def run(self, workspace: Workspace) -> str:
        """Drive the selection through *workspace* until submit or cancel."""
        while True:
            toggles = await workspace.choose_dependencies(self.catalog, set(self.selected))
            if toggles is None:
                raise CancelledByUser("Dependencies")
            if not toggles:
                return self.submit()
            for dependency_id in toggles:
                self.toggle(dependency_id)


# ---------------------------------------------------------------------------
# Collector
# ---------------------------------------------------------------------------


class ParameterCollector:
    """Collect a complete :class:`ProjectConfig` from the user.

    Args:
        workspace: Where prompts are shown.
        defaults: Values used for blank answers.
        mode: ``"prompts"`` for the sequential chain, ``"form"`` for the
            editable document.
    """

    def __init__(self, workspace: Workspace, defaults: ScaffoldDefaults, mode: str = "prompts") -> None:
        self.workspace = workspace
        self.defaults = defaults
        self.mode = mode

    async def collect(self, catalog: DependencyCatalog | None = None) -> ProjectConfig:
        if self.mode == "form":
            answers = await ProjectForm(self.workspace, self.defaults).run()
        else:
            answers = await PromptChain(self.workspace, self.defaults).run()

        answers["dependencies"] = await self._collect_dependencies(catalog)
        logger.debug("Collected project answers: %s", answers)
        return ProjectConfig.from_values(answers, self.defaults)

    async def _collect_dependencies(self, catalog: DependencyCatalog | None) -> str:
        if catalog is not None and not catalog.is_empty():
            return await DependencySelector(catalog, self.defaults.dependencies).run(self.workspace)

        value = await self.workspace.prompt("Dependencies", self.defaults.dependencies)
        if value is None:
            raise CancelledByUser("Dependencies")
        return or_default(value, self.defaults.dependencies)
