"""Error taxonomy for the scaffolding flow.

Every failure is terminal for the current ``new`` invocation. The orchestrator
catches ``ScaffoldError`` once, reports it to the user, and never retries.
"""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for all user-reportable scaffolding failures."""


class NetworkError(ScaffoldError):
    """Raised when the metadata service cannot be reached."""

    def __init__(self, url: str, cause: BaseException | str) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"Error making request to {url}: {cause}")


class DecodeError(ScaffoldError):
    """Raised when the metadata response is not valid JSON."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Error decoding JSON: {detail}")


class ExecutableNotFoundError(ScaffoldError):
    """Raised when the generator executable is not on ``PATH``."""

    def __init__(self, binary: str) -> None:
        self.binary = binary
        super().__init__("Spring Boot CLI not found; please install it")


class GenerationFailedError(ScaffoldError):
    """Raised when the generator exits with a non-zero status."""

    def __init__(self, exit_code: int, stderr: str = "") -> None:
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__("Error creating project")


class CancelledByUser(ScaffoldError):
    """Raised when a prompt, form, or selector is aborted."""

    def __init__(self, step: str = "") -> None:
        self.step = step
        super().__init__("Project creation cancelled" + (f" at {step}" if step else ""))


class SessionInProgressError(ScaffoldError):
    """Raised when a second scaffold session starts while one is running."""

    def __init__(self) -> None:
        super().__init__("A project is already being created; wait for it to finish")


class EditorError(ScaffoldError):
    """Raised when the form editor cannot be started."""

    def __init__(self, editor: str, cause: BaseException | str) -> None:
        self.editor = editor
        self.cause = cause
        super().__init__(f"Could not start editor {editor!r}: {cause}")


class ConfigError(ScaffoldError):
    """Raised when settings from the environment or a settings file are invalid."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid configuration: {detail}")
