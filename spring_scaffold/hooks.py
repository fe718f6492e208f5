"""Actions run after the generator succeeds."""

from __future__ import annotations

import logging
from pathlib import Path

from .models import ProjectConfig
from .workspace import Workspace

logger = logging.getLogger(__name__)


class PostGenerationHook:
    """Move into the new project and show its source tree."""

    def __init__(self, workspace: Workspace) -> None:
        self.workspace = workspace

    def run(self, config: ProjectConfig, base_dir: Path) -> Path:
        """Return the project root after switching to it."""
        project_root = Path(base_dir) / config.name
        self.workspace.change_directory(project_root)
        logger.info("Working directory is now %s", project_root)

        ignore = [f"^{path}" for path in config.build_output_dirs]
        self.workspace.show_file_tree(
            project_root / config.source_dir, ignore, base=project_root
        )
        self.workspace.notify("Project created successfully!", "success")
        return project_root
