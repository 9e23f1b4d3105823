"""Error taxonomy for project generation.

Every failure surfaced to the user derives from :class:`ScaffoldError` and
carries a short ``kind`` string so pipeline results can be attributed to an
error category without inspecting the exception type.
"""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for all create-filament errors."""

    kind: str = "error"


class ValidationError(ScaffoldError):
    """Raised when a raw answer is missing or malformed (e.g. a bad project name)."""

    kind = "validation"


class ConflictError(ScaffoldError):
    """Raised when the output directory already exists."""

    kind = "conflict"

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f'Directory "{path}" already exists')


class FilesystemError(ScaffoldError):
    """Raised when a directory or file cannot be created or copied."""

    kind = "filesystem"


class SubprocessError(ScaffoldError):
    """Raised when an external command (package manager, git) exits non-zero."""

    kind = "subprocess"

    def __init__(self, message: str, command: str = "", returncode: int = 0, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)
