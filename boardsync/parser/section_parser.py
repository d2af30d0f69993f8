"""Markdown section parser.

Splits a document into its second-level (``## ``) sections. Parsing is total:
any text, including text without headings, yields a (possibly empty) list.
"""

import re

from boardsync.dsl.schema import SECTION_HEADER_LEVEL, ParsedSection


SECTION_HEADER_REGEX = re.compile(
    rf"^#{{{SECTION_HEADER_LEVEL}}} (?P<title>.*)$"
)
TITLE_HEADER_REGEX = re.compile(r"^# ")
FRONTMATTER_DELIMITER = "---"
INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')
MARKDOWN_EXTENSIONS = (".md", ".markdown")


def extract_section_name(line: str) -> str | None:
    """Return the section title of a heading line, or None."""
    match = SECTION_HEADER_REGEX.match(line)
    if not match:
        return None
    title = match.group("title").strip()
    return title or None


def is_section_header(line: str) -> bool:
    return extract_section_name(line) is not None


def format_section_header(name: str) -> str:
    """Format a section heading, e.g. ``## Backlog``."""
    return f"{'#' * SECTION_HEADER_LEVEL} {name}"


def split_lines(text: str) -> list[str]:
    return text.split("\n")


def _trim_trailing_blank(lines: list[str]) -> list[str]:
    end = len(lines)
    while end > 0 and not lines[end - 1].strip():
        end -= 1
    return lines[:end]


class SectionParser:
    """Parses documents into ordered ``ParsedSection`` lists.

    Sections sharing a title are kept as separate entries.
    """

    def parse(self, text: str) -> list[ParsedSection]:
        """Parse text into sections.

        Args:
            text: Raw document text.

        Returns:
            Sections in document order.
        """
        lines = split_lines(text)
        sections: list[ParsedSection] = []
        current_name: str | None = None
        current_start = 0
        current_lines: list[str] = []

        for index, line in enumerate(lines):
            name = extract_section_name(line)
            if name is not None:
                if current_name is not None:
                    sections.append(
                        self._close(current_name, current_start, index - 1, current_lines)
                    )
                current_name = name
                current_start = index
                current_lines = []
            elif current_name is not None:
                current_lines.append(line)

        if current_name is not None:
            sections.append(
                self._close(current_name, current_start, len(lines) - 1, current_lines)
            )

        return sections

    @staticmethod
    def _close(name: str, start: int, end: int, lines: list[str]) -> ParsedSection:
        return ParsedSection(
            name=name,
            start_line=start,
            end_line=end,
            content_lines=tuple(_trim_trailing_blank(lines)),
        )


def parse_sections(text: str) -> list[ParsedSection]:
    """Parse text with a default SectionParser."""
    return SectionParser().parse(text)


def find_frontmatter_end(lines: list[str]) -> int:
    """Locate the end of the front matter / title block.

    Returns the index of the second ``---`` delimiter line, or of the first
    ``# `` title line if that comes first. Returns 0 when neither is found.
    """
    delimiters = 0
    for index, line in enumerate(lines):
        if line.strip() == FRONTMATTER_DELIMITER:
            delimiters += 1
            if delimiters == 2:
                return index
        if TITLE_HEADER_REGEX.match(line):
            return index
    return 0


def split_preamble(lines: list[str], sections: list[ParsedSection]) -> tuple[list[str], list[str]]:
    """Split the lines before the first section into front matter and free text.

    The front matter runs up to ``find_frontmatter_end`` (inclusive) when that
    boundary lies before the first section. Free text between the boundary and
    the first section is returned separately so it is never dropped.

    Returns:
        Tuple of (front_matter_lines, intro_lines), trailing blanks trimmed.
    """
    first_section = sections[0].start_line if sections else len(lines)
    boundary = find_frontmatter_end(lines)
    has_boundary = boundary > 0 or (
        bool(lines) and TITLE_HEADER_REGEX.match(lines[0]) is not None
    )

    head_end = boundary + 1 if has_boundary and boundary < first_section else 0
    head = _trim_trailing_blank(lines[:head_end])
    intro = _trim_trailing_blank(lines[head_end:first_section])
    while intro and not intro[0].strip():
        intro.pop(0)
    return head, intro


def is_markdown_file(path: str) -> bool:
    return path.lower().endswith(MARKDOWN_EXTENSIONS)


def sanitize_file_name(name: str) -> str:
    """Drop characters forbidden in file names and collapse whitespace."""
    cleaned = INVALID_FILENAME_CHARS.sub("", name)
    return re.sub(r"\s+", " ", cleaned).strip()
