"""Section reconciler.

Compares the sections of a document with the sections a layout requires and
rewrites the document so every required section exists. Rewriting never drops
text: existing sections keep their content, sections the layout does not know
about are carried over, and titles used twice are kept (and reported).
"""

import logging

from boardsync.dsl.schema import (
    AddSectionsOptions,
    InsertPosition,
    ParsedSection,
    ReconciliationResult,
)
from boardsync.engine.default_content import DEFAULT_CONTENT_RULES, DefaultContentRules
from boardsync.parser.section_parser import (
    SectionParser,
    format_section_header,
    split_lines,
    split_preamble,
)
from boardsync.templates.registry import LayoutRegistry

logger = logging.getLogger(__name__)


class SectionReconciler:
    """Diffs documents against layouts and adds missing sections."""

    def __init__(
        self,
        registry: LayoutRegistry,
        content_rules: DefaultContentRules = DEFAULT_CONTENT_RULES,
        parser: SectionParser | None = None,
    ) -> None:
        """Initialize the reconciler.

        Args:
            registry: Source of layout definitions.
            content_rules: Placeholder content table for new sections.
            parser: Section parser (a default one is created if omitted).
        """
        self.registry = registry
        self.content_rules = content_rules
        self.parser = parser or SectionParser()

    def reconcile(self, text: str, layout_name: str) -> ReconciliationResult:
        """Diff a document against a layout.

        Args:
            text: Document text.
            layout_name: Registered layout name.

        Returns:
            ReconciliationResult.

        Raises:
            LayoutNotFoundError: If the layout is not registered.
        """
        layout = self.registry.get_or_raise(layout_name)
        sections = self.parser.parse(text)
        return self._diff(layout_name, layout.section_names, sections)

    def apply_missing_sections(
        self,
        text: str,
        layout_name: str,
        options: AddSectionsOptions | None = None,
    ) -> str:
        """Return the document rewritten to contain every required section.

        Args:
            text: Document text.
            layout_name: Registered layout name.
            options: Insert position and default content switch.

        Returns:
            New document text; the input is not modified.

        Raises:
            LayoutNotFoundError: If the layout is not registered.
        """
        options = options or AddSectionsOptions()
        layout = self.registry.get_or_raise(layout_name)
        lines = split_lines(text)
        sections = self.parser.parse(text)
        result = self._diff(layout_name, layout.section_names, sections)

        missing = [
            self._render_missing(name, layout_name, options) for name in result.missing_sections
        ]

        if options.insert_position == InsertPosition.END:
            return _join([_strip_blank(lines), *missing])

        head, intro = split_preamble(lines, sections)
        chunks: list[list[str]] = [head, intro]
        if options.insert_position == InsertPosition.LAYOUT_ORDER:
            chunks.extend(self._layout_order_chunks(result, sections, layout_name, options))
        else:
            chunks.extend(missing)
            chunks.append(_verbatim_body(lines, sections))

        return _join(chunks)

    def _diff(
        self,
        layout_name: str,
        required: list[str],
        sections: list[ParsedSection],
    ) -> ReconciliationResult:
        existing_names = [section.name for section in sections]
        existing_set = set(existing_names)
        required_set = set(required)

        missing = _unique(name for name in required if name not in existing_set)
        extra = _unique(name for name in existing_names if name not in required_set)

        seen: set[str] = set()
        duplicates = []
        for name in existing_names:
            if name in seen and name not in duplicates:
                duplicates.append(name)
            seen.add(name)
        if duplicates:
            logger.warning(
                f'Document for layout "{layout_name}" repeats section(s): {", ".join(duplicates)}'
            )

        return ReconciliationResult(
            layout_name=layout_name,
            existing_sections=sections,
            missing_sections=missing,
            extra_sections=extra,
            correct_order=list(required),
            duplicate_sections=duplicates,
        )

    def _layout_order_chunks(
        self,
        result: ReconciliationResult,
        sections: list[ParsedSection],
        layout_name: str,
        options: AddSectionsOptions,
    ) -> list[list[str]]:
        by_name: dict[str, list[ParsedSection]] = {}
        for section in sections:
            by_name.setdefault(section.name, []).append(section)

        chunks = []
        # A title the layout repeats is still emitted once.
        for name in _unique(result.correct_order):
            occurrences = by_name.get(name)
            if not occurrences:
                chunks.append(self._render_missing(name, layout_name, options))
                continue
            # Every occurrence of a repeated title is kept, in document order.
            chunks.extend(_render(s.name, s.content_lines) for s in occurrences)

        for name in result.extra_sections:
            chunks.extend(_render(s.name, s.content_lines) for s in by_name[name])
        return chunks

    def _render_missing(
        self, name: str, layout_name: str, options: AddSectionsOptions
    ) -> list[str]:
        content: list[str] = []
        if options.add_default_content:
            content = self.content_rules.generate(name, layout_name)
        return _render(name, content)


def _strip_blank(lines) -> list[str]:
    """Drop leading and trailing blank lines."""
    body = list(lines)
    while body and not body[0].strip():
        body.pop(0)
    while body and not body[-1].strip():
        body.pop()
    return body


def _render(name: str, content_lines) -> list[str]:
    body = _strip_blank(content_lines)
    if not body:
        return [format_section_header(name)]
    return [format_section_header(name), "", *body]


def _verbatim_body(lines: list[str], sections: list[ParsedSection]) -> list[str]:
    """Document lines from the first section heading on, unchanged."""
    if not sections:
        return []
    return _strip_blank(lines[sections[0].start_line:])


def _join(chunks: list[list[str]]) -> str:
    blocks = ["\n".join(chunk) for chunk in chunks if chunk]
    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"


def _unique(names) -> list[str]:
    seen: set[str] = set()
    ordered = []
    for name in names:
        if name not in seen:
            seen.add(name)
            ordered.append(name)
    return ordered
