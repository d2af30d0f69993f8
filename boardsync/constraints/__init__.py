"""Layout geometry validation."""

from boardsync.constraints.engine import (
    GridValidator,
    ValidationResult,
    Violation,
    ViolationType,
    validate_layout,
)

__all__ = [
    "GridValidator",
    "ValidationResult",
    "Violation",
    "ViolationType",
    "validate_layout",
]
