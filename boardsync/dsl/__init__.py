"""Data model for layouts, documents and reconciliation."""

from boardsync.dsl.schema import (
    GRID_COLS,
    GRID_ROWS,
    LAYOUT_FRONTMATTER_KEY,
    MIN_SIZE,
    SECTION_HEADER_LEVEL,
    AddSectionsOptions,
    AddSectionsResult,
    Block,
    InsertPosition,
    LayoutDefinition,
    LayoutInfo,
    NoteCreationOptions,
    NoteCreationResult,
    ParsedSection,
    ReconciliationResult,
)

__all__ = [
    "GRID_COLS",
    "GRID_ROWS",
    "LAYOUT_FRONTMATTER_KEY",
    "MIN_SIZE",
    "SECTION_HEADER_LEVEL",
    "AddSectionsOptions",
    "AddSectionsResult",
    "Block",
    "InsertPosition",
    "LayoutDefinition",
    "LayoutInfo",
    "NoteCreationOptions",
    "NoteCreationResult",
    "ParsedSection",
    "ReconciliationResult",
]
