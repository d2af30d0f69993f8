"""Pydantic v2 models for layouts, parsed documents and reconciliation results.

A layout is a named, ordered list of rectangular blocks placed on a fixed grid
of GRID_COLS x GRID_ROWS integer cells. Each block names one ``## `` section a
board document is expected to contain.
"""

from enum import Enum
from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field


# Constants
GRID_COLS = 24
GRID_ROWS = 100
MIN_SIZE = 2
SECTION_HEADER_LEVEL = 2
LAYOUT_FRONTMATTER_KEY = "agile-board"


class InsertPosition(str, Enum):
    """Where missing sections go when a document is rewritten."""

    LAYOUT_ORDER = "layout-order"
    END = "end"
    AFTER_FRONTMATTER = "after-frontmatter"


# ============================================================================
# Layout Models
# ============================================================================


class Block(BaseModel):
    """One rectangular region of a layout, in grid cells.

    Geometry is not constrained here: out-of-bounds blocks must still be
    representable so the grid validator can report them.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    title: str = Field(description="Section title the block stands for")
    x: int = Field(description="Left column (0-based)")
    y: int = Field(description="Top row (0-based)")
    w: int = Field(description="Width in columns")
    h: int = Field(description="Height in rows")

    @property
    def right(self) -> int:
        """Exclusive right edge."""
        return self.x + self.w

    @property
    def bottom(self) -> int:
        """Exclusive bottom edge."""
        return self.y + self.h

    def cells(self) -> Iterator[tuple[int, int]]:
        """Iterate the cells of the half-open rectangle, column by column."""
        for cx in range(self.x, self.right):
            for cy in range(self.y, self.bottom):
                yield cx, cy

    def intersects(self, other: "Block") -> bool:
        """True when the two half-open rectangles share at least one cell."""
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )


class LayoutDefinition(BaseModel):
    """A validated, immutable layout."""

    model_config = ConfigDict(frozen=True)

    name: str
    blocks: tuple[Block, ...]

    @property
    def section_names(self) -> list[str]:
        """Block titles in layout order."""
        return [block.title for block in self.blocks]

    def __len__(self) -> int:
        return len(self.blocks)


class LayoutInfo(BaseModel):
    """Display metadata for a layout."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    description: str = ""
    sections: list[str] = Field(default_factory=list)
    block_count: int = 0
    category: str = "custom"


# ============================================================================
# Document Models
# ============================================================================


class ParsedSection(BaseModel):
    """A ``## `` section of a document.

    ``start_line`` is the heading line, ``end_line`` the last line before the
    next heading (or the last line of the document). ``content_lines`` holds
    the body without the heading and without trailing blank lines.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    start_line: int
    end_line: int
    content_lines: tuple[str, ...] = ()

    @property
    def content(self) -> str:
        return "\n".join(self.content_lines).strip()


class ReconciliationResult(BaseModel):
    """Diff between a document's sections and the sections a layout requires."""

    model_config = ConfigDict(frozen=True)

    layout_name: str
    existing_sections: list[ParsedSection] = Field(default_factory=list)
    missing_sections: list[str] = Field(
        default_factory=list, description="Required but absent, in layout order"
    )
    extra_sections: list[str] = Field(
        default_factory=list, description="Present but not required, in document order"
    )
    correct_order: list[str] = Field(default_factory=list)
    duplicate_sections: list[str] = Field(
        default_factory=list, description="Titles used by more than one section"
    )

    @property
    def existing_section_names(self) -> list[str]:
        return [section.name for section in self.existing_sections]

    @property
    def is_complete(self) -> bool:
        return not self.missing_sections


class AddSectionsOptions(BaseModel):
    """Options for rewriting a document with its missing sections."""

    model_config = ConfigDict(frozen=True)

    insert_position: InsertPosition = InsertPosition.LAYOUT_ORDER
    add_default_content: bool = True
    auto_save: bool = True


class AddSectionsResult(BaseModel):
    """Outcome of adding missing sections to a stored document."""

    success: bool
    sections_added: int = 0
    added_section_names: list[str] = Field(default_factory=list)
    new_content: str = ""
    messages: list[str] = Field(default_factory=list)


class NoteCreationOptions(BaseModel):
    """Options for creating a new board document from a layout."""

    model_config = ConfigDict(frozen=True)

    layout_name: str
    file_name: str | None = None
    folder: str | None = None
    custom_content: dict[str, str] = Field(default_factory=dict)
    auto_open: bool = True


class NoteCreationResult(BaseModel):
    """A freshly created (or reused) board document."""

    path: str
    layout_name: str
    display_name: str
    sections_count: int
    created: bool = True
