"""Layout registry and built-in layout library."""

from boardsync.templates.library import BUILT_IN_LAYOUTS, LAYOUT_INFO, load_layout_file
from boardsync.templates.registry import (
    LayoutRegistry,
    create_default_registry,
    validate_layout_name,
)

__all__ = [
    "BUILT_IN_LAYOUTS",
    "LAYOUT_INFO",
    "LayoutRegistry",
    "create_default_registry",
    "load_layout_file",
    "validate_layout_name",
]
