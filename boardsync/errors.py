"""Exception hierarchy for boardsync.

Hierarchy:
    BoardSyncError (base)
    ├── LayoutNotFoundError          # layout name has no valid registered definition
    ├── IOFailure                    # document store read/write failure
    ├── ValidationError              # invalid input (layout name, options, ...)
    ├── ConfigurationError           # unreadable layout file, bad settings
    └── ConcurrentModificationError  # compare-and-swap write rejected

Geometry problems found while validating layouts are not exceptions; they are
reported as ``Violation`` values by the grid validator.
"""

from typing import Any


class BoardSyncError(Exception):
    """Base exception for all boardsync errors.

    Attributes:
        message: Human-readable error description.
        code: Stable machine-readable error code.
        context: Additional context data for debugging.
    """

    code = "BOARDSYNC_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        """Return error message with optional context."""
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class LayoutNotFoundError(BoardSyncError):
    """Requested layout is not registered (or was rejected at load time)."""

    code = "LAYOUT_NOT_FOUND"

    def __init__(self, layout_name: str):
        super().__init__(
            f'Layout "{layout_name}" not found',
            context={"layout_name": layout_name},
        )
        self.layout_name = layout_name


class IOFailure(BoardSyncError):
    """A document store operation failed."""

    code = "IO_FAILURE"

    def __init__(self, path: str, cause: BaseException, operation: str = "access"):
        super().__init__(
            f'Unable to {operation} "{path}": {cause}',
            context={"path": path, "operation": operation},
        )
        self.path = path
        self.cause = cause
        self.operation = operation


class ValidationError(BoardSyncError):
    """Input failed validation."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, value: Any, reason: str = ""):
        message = f'Validation failed for field "{field}"'
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, context={"field": field, "value": value})
        self.field = field
        self.value = value


class ConfigurationError(BoardSyncError):
    """Configuration or layout source could not be used."""

    code = "CONFIGURATION_ERROR"


class ConcurrentModificationError(BoardSyncError):
    """Document changed between read and write."""

    code = "CONCURRENT_MODIFICATION"

    def __init__(self, path: str):
        super().__init__(
            f'Document "{path}" was modified while it was being rewritten',
            context={"path": path},
        )
        self.path = path
