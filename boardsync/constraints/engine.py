"""Grid validator for layout definitions.

Checks every block of a layout against the grid bounds and against the blocks
placed before it. All violations are collected in one pass so layout authors
see every conflict at once.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from boardsync.dsl.schema import GRID_COLS, GRID_ROWS, MIN_SIZE, Block
from boardsync.parser.section_parser import extract_section_name, format_section_header


class ViolationType(str, Enum):
    """Kinds of layout geometry violations."""

    MALFORMED_BLOCK = "malformed_block"
    OUT_OF_BOUNDS = "out_of_bounds"
    OVERLAP = "overlap"


@dataclass
class Violation:
    """Represents a layout geometry violation."""

    rule: ViolationType
    message: str
    block_index: int
    block_title: str | None = None
    conflicting_title: str | None = None
    cell: tuple[int, int] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "rule": self.rule.value,
            "message": self.message,
            "block_index": self.block_index,
            "block_title": self.block_title,
            "conflicting_title": self.conflicting_title,
            "cell": list(self.cell) if self.cell else None,
        }


@dataclass
class ValidationResult:
    """Result of layout validation."""

    valid: bool
    violations: list[Violation] = field(default_factory=list)
    blocks: list[Block] = field(default_factory=list)

    def by_rule(self, rule: ViolationType) -> list[Violation]:
        """Violations of a single kind."""
        return [v for v in self.violations if v.rule == rule]


_NUMERIC_FIELDS = ("x", "y", "w", "h")


class GridValidator:
    """Validates layouts on a bounded integer grid."""

    def __init__(
        self,
        cols: int = GRID_COLS,
        rows: int = GRID_ROWS,
        min_size: int = MIN_SIZE,
    ) -> None:
        """Initialize the validator.

        Args:
            cols: Grid width in columns.
            rows: Grid height in rows.
            min_size: Blocks must be strictly wider and taller than this.
        """
        self.cols = cols
        self.rows = rows
        self.min_size = min_size

    def validate(self, blocks: Iterable[Block | Mapping[str, Any]]) -> ValidationResult:
        """Validate a layout.

        Args:
            blocks: Blocks in layout order, as ``Block`` models or raw mappings.

        Returns:
            ValidationResult; ``blocks`` holds the well-formed blocks.
        """
        if isinstance(blocks, (str, bytes, Mapping)) or not isinstance(blocks, Iterable):
            return ValidationResult(
                valid=False,
                violations=[
                    Violation(
                        rule=ViolationType.MALFORMED_BLOCK,
                        message=f"Layout is not a list of blocks: {blocks!r}",
                        block_index=-1,
                    )
                ],
            )

        violations: list[Violation] = []
        accepted: list[Block] = []
        # Each cell holds the index of the block that claimed it first.
        grid: list[list[int | None]] = [[None] * self.rows for _ in range(self.cols)]
        titles: dict[int, str] = {}

        for index, raw in enumerate(blocks):
            block = self._coerce(raw)
            if block is None:
                violations.append(
                    Violation(
                        rule=ViolationType.MALFORMED_BLOCK,
                        message=f"Block {index} is malformed: {raw!r}",
                        block_index=index,
                        block_title=_raw_title(raw),
                    )
                )
                continue

            accepted.append(block)
            titles[index] = block.title

            if not self.in_bounds(block):
                violations.append(
                    Violation(
                        rule=ViolationType.OUT_OF_BOUNDS,
                        message=(
                            f'Block {index} "{block.title}" is out of bounds '
                            f"(x={block.x}, y={block.y}, w={block.w}, h={block.h})"
                        ),
                        block_index=index,
                        block_title=block.title,
                    )
                )
                continue

            violations.extend(self._mark(grid, index, block, titles))

        return ValidationResult(
            valid=not violations,
            violations=violations,
            blocks=accepted,
        )

    def in_bounds(self, block: Block) -> bool:
        """Check the block against the grid bounds and minimum size."""
        return (
            block.x >= 0
            and block.y >= 0
            and block.w > self.min_size
            and block.h > self.min_size
            and block.x + block.w <= self.cols
            and block.y + block.h <= self.rows
        )

    def _mark(
        self,
        grid: list[list[int | None]],
        index: int,
        block: Block,
        titles: dict[int, str],
    ) -> list[Violation]:
        """Mark the block's cells, reporting the first shared cell per earlier block."""
        violations = []
        reported: set[int] = set()

        for cx, cy in block.cells():
            owner = grid[cx][cy]
            if owner is not None and owner not in reported:
                reported.add(owner)
                violations.append(
                    Violation(
                        rule=ViolationType.OVERLAP,
                        message=(
                            f'Block {index} "{block.title}" overlaps block {owner} '
                            f'"{titles[owner]}" at ({cx}, {cy})'
                        ),
                        block_index=index,
                        block_title=block.title,
                        conflicting_title=titles[owner],
                        cell=(cx, cy),
                    )
                )
            if owner is None:
                grid[cx][cy] = index

        return violations

    @staticmethod
    def _coerce(raw: Any) -> Block | None:
        """Return a Block for well-formed input, None otherwise."""
        if isinstance(raw, Block):
            return raw if _readable_title(raw.title) else None
        if not isinstance(raw, Mapping):
            return None
        if not isinstance(raw.get("title"), str) or not _readable_title(raw["title"]):
            return None
        for name in _NUMERIC_FIELDS:
            value = raw.get(name)
            # bool is an int subclass but never a coordinate
            if not isinstance(value, int) or isinstance(value, bool):
                return None
        return Block(
            title=raw["title"],
            x=raw["x"],
            y=raw["y"],
            w=raw["w"],
            h=raw["h"],
        )


def _readable_title(title: str) -> bool:
    """A title the section parser reads back unchanged from its heading."""
    return "\n" not in title and extract_section_name(format_section_header(title)) == title


def _raw_title(raw: Any) -> str | None:
    if isinstance(raw, Mapping) and isinstance(raw.get("title"), str):
        return raw["title"]
    return None


def validate_layout(blocks: Iterable[Block | Mapping[str, Any]]) -> ValidationResult:
    """Validate blocks against the default 24 x 100 grid."""
    return GridValidator().validate(blocks)
