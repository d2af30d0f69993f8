"""Layout registry: owns the validated set of named layouts."""

import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

from boardsync.constraints.engine import GridValidator, Violation
from boardsync.dsl.schema import Block, LayoutDefinition, LayoutInfo
from boardsync.errors import LayoutNotFoundError, ValidationError
from boardsync.templates.library import BUILT_IN_LAYOUTS, LAYOUT_INFO

logger = logging.getLogger(__name__)

LAYOUT_NAME_PATTERN = re.compile(r"^layout_[a-z0-9_]+$", re.IGNORECASE)

Definitions = Mapping[str, Sequence[Block | Mapping[str, Any]]]


class LayoutRegistry:
    """Registry of validated layout definitions.

    Layouts are validated when loaded; an invalid layout is dropped and its
    violations kept in ``diagnostics`` while the others load normally. The
    registry is an ordinary instance: create one, hand it to consumers, and
    call ``reload()`` to rebuild it from its definition source.
    """

    def __init__(
        self,
        definitions: Definitions | None = None,
        metadata: Mapping[str, LayoutInfo] | None = None,
        validator: GridValidator | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            definitions: Optional layouts to load immediately.
            metadata: Curated display metadata keyed by layout name.
            validator: Grid validator (defaults to the 24 x 100 grid).
        """
        self._layouts: dict[str, LayoutDefinition] = {}
        self._metadata: dict[str, LayoutInfo] = dict(metadata or {})
        self._validator = validator or GridValidator()
        self._source: Definitions = {}
        self.diagnostics: dict[str, list[Violation]] = {}

        if definitions is not None:
            self.load(definitions)

    def load(self, definitions: Definitions) -> int:
        """Replace the registry contents with the valid layouts of ``definitions``.

        Never raises on bad layouts; they are logged and skipped.

        Args:
            definitions: Mapping of layout name to blocks.

        Returns:
            Number of layouts loaded.
        """
        self._layouts.clear()
        self.diagnostics.clear()
        self._source = definitions

        for name, blocks in definitions.items():
            result = self._validator.validate(blocks)
            if not result.valid:
                self.diagnostics[name] = result.violations
                logger.warning(
                    f'Layout "{name}" rejected with {len(result.violations)} violation(s)'
                )
                for violation in result.violations:
                    logger.warning(f"  [{name}] {violation.rule.value}: {violation.message}")
                continue

            self._layouts[name] = LayoutDefinition(name=name, blocks=tuple(result.blocks))
            logger.debug(f'Layout "{name}" loaded ({len(result.blocks)} blocks)')

        logger.info(
            f"{len(self._layouts)} layout(s) loaded, {len(self.diagnostics)} rejected"
        )
        return len(self._layouts)

    def reload(self) -> int:
        """Reload from the last definition source."""
        return self.load(self._source)

    def set_metadata(self, name: str, info: LayoutInfo) -> None:
        """Attach curated metadata to a layout name."""
        self._metadata[name] = info

    def get(self, name: str) -> LayoutDefinition | None:
        """Get a layout by name.

        Args:
            name: Layout name.

        Returns:
            LayoutDefinition or None if not registered.
        """
        return self._layouts.get(name)

    def get_or_raise(self, name: str) -> LayoutDefinition:
        """Get a layout by name, raising if not found.

        Raises:
            LayoutNotFoundError: If the layout is not registered.
        """
        layout = self._layouts.get(name)
        if layout is None:
            raise LayoutNotFoundError(name)
        return layout

    def list_names(self) -> list[str]:
        """Registered layout names, in load order."""
        return list(self._layouts.keys())

    def get_metadata(self, name: str) -> LayoutInfo | None:
        """Get display metadata for a registered layout.

        Falls back to metadata derived from the block titles when no curated
        entry exists.

        Args:
            name: Layout name.

        Returns:
            LayoutInfo or None if the layout is not registered.
        """
        layout = self._layouts.get(name)
        if layout is None:
            return None

        info = self._metadata.get(name)
        if info is not None:
            return info

        return LayoutInfo(
            name=name,
            display_name=name,
            description="Custom layout",
            sections=layout.section_names,
            block_count=len(layout.blocks),
            category="custom",
        )

    def list_metadata(self) -> list[LayoutInfo]:
        """Metadata for every registered layout, in load order."""
        return [self.get_metadata(name) for name in self._layouts]

    def get_display_name(self, name: str) -> str:
        """Human-readable layout name, or the name itself."""
        info = self._metadata.get(name)
        return info.display_name if info else name

    def __contains__(self, name: object) -> bool:
        return name in self._layouts

    def __len__(self) -> int:
        return len(self._layouts)


def validate_layout_name(name: Any) -> str:
    """Check that ``name`` is a well-formed layout identifier.

    Raises:
        ValidationError: If the name is empty or not of the form ``layout_<word>``.
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("layout_name", name, "a layout name is required")
    if not LAYOUT_NAME_PATTERN.match(name):
        raise ValidationError(
            "layout_name",
            name,
            'must start with "layout_" and contain only letters, digits and underscores',
        )
    return name


def create_default_registry(extra: Definitions | None = None) -> LayoutRegistry:
    """Registry preloaded with the built-in layouts plus optional extras."""
    definitions: dict[str, Sequence[Block | Mapping[str, Any]]] = dict(BUILT_IN_LAYOUTS)
    if extra:
        definitions.update(extra)
    return LayoutRegistry(definitions, metadata=LAYOUT_INFO)
