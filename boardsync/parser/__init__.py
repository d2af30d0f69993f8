"""Markdown parser module - splits board documents into sections.

Provides:
- Section parsing (``## `` headings, duplicates preserved)
- Front matter / title boundary detection
- Heading and file name helpers
"""

from boardsync.parser.section_parser import (
    SectionParser,
    extract_section_name,
    find_frontmatter_end,
    format_section_header,
    is_markdown_file,
    is_section_header,
    parse_sections,
    sanitize_file_name,
    split_preamble,
)

__all__ = [
    "SectionParser",
    "extract_section_name",
    "find_frontmatter_end",
    "format_section_header",
    "is_markdown_file",
    "is_section_header",
    "parse_sections",
    "sanitize_file_name",
    "split_preamble",
]
