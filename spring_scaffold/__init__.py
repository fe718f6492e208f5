"""spring-scaffold -- interactive Spring Boot project scaffolding.

Fetches the Spring Initializr metadata, collects project parameters from the
user, and runs the Spring Boot CLI (``spring init``) to create the project.

Quick usage::

    from spring_scaffold import ConsoleWorkspace, Orchestrator, ScaffoldSettings

    orchestrator = Orchestrator(ScaffoldSettings(), ConsoleWorkspace())
    state = await orchestrator.run()
"""

from spring_scaffold.cache import CacheEntry, MetadataCache
from spring_scaffold.config import ScaffoldDefaults, ScaffoldSettings
from spring_scaffold.errors import (
    CancelledByUser,
    ConfigError,
    DecodeError,
    EditorError,
    ExecutableNotFoundError,
    GenerationFailedError,
    NetworkError,
    ScaffoldError,
    SessionInProgressError,
)
from spring_scaffold.generator import GenerationResult, ProjectGenerator, build_invocation
from spring_scaffold.hooks import PostGenerationHook
from spring_scaffold.metadata_client import DependencyCatalog, MetadataClient
from spring_scaffold.models import ProjectConfig
from spring_scaffold.orchestrator import Orchestrator, ScaffoldState
from spring_scaffold.workspace import ConsoleWorkspace, Workspace

__all__ = [
    # Configuration
    "ScaffoldDefaults",
    "ScaffoldSettings",
    "ProjectConfig",
    # Metadata
    "CacheEntry",
    "MetadataCache",
    "MetadataClient",
    "DependencyCatalog",
    # Generation
    "ProjectGenerator",
    "GenerationResult",
    "build_invocation",
    "PostGenerationHook",
    # Orchestration
    "Orchestrator",
    "ScaffoldState",
    "Workspace",
    "ConsoleWorkspace",
    # Errors
    "ScaffoldError",
    "NetworkError",
    "DecodeError",
    "ExecutableNotFoundError",
    "GenerationFailedError",
    "CancelledByUser",
    "SessionInProgressError",
    "EditorError",
    "ConfigError",
]
