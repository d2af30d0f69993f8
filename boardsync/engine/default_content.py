"""Placeholder content for sections added to a document.

Content is chosen by an ordered table of rules. The first rule whose predicate
accepts the (section title, layout name) pair generates the lines. Keyword
matching is case-insensitive and covers English and French titles.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable


Predicate = Callable[[str, str], bool]
Generator = Callable[[str, str], list[str]]


@dataclass(frozen=True)
class ContentRule:
    """A single default-content rule."""

    name: str
    description: str
    matches: Predicate
    generate: Generator


def _contains_any(*keywords: str) -> Predicate:
    def predicate(title: str, layout_name: str) -> bool:
        lowered = title.lower()
        return any(keyword in lowered for keyword in keywords)

    return predicate


def _lines(*lines: str) -> Generator:
    return lambda title, layout_name: list(lines)


# ============================================================================
# Eisenhower quadrants
# ============================================================================

_NEGATION = r"(?:not|pas|ni|neither|nor|non)[\s-]+"


def _flag(title: str, keyword: str) -> bool:
    """True when the keyword appears in the title without a negation in front."""
    lowered = title.lower()
    if keyword not in lowered:
        return False
    return re.search(rf"\b{_NEGATION}{keyword}", lowered) is None


def _eisenhower(urgent: bool, important: bool) -> Predicate:
    def predicate(title: str, layout_name: str) -> bool:
        if "eisenhower" not in layout_name.lower():
            return False
        if "urgent" not in title.lower() and "important" not in title.lower():
            return False
        return _flag(title, "urgent") == urgent and _flag(title, "important") == important

    return predicate


COMMON_RULES: list[ContentRule] = [
    ContentRule(
        name="todo",
        description="Backlog style columns get a short checklist",
        matches=_contains_any("todo", "to do", "to-do", "backlog", "faire"),
        generate=_lines(
            "- [ ] New task",
            "- [ ] Another important task",
        ),
    ),
    ContentRule(
        name="in_progress",
        description="Work in progress gets one open item and a note",
        matches=_contains_any("progress", "doing", "cours"),
        generate=_lines(
            "- [ ] Task in progress",
            "",
            "*Tasks currently being worked on*",
        ),
    ),
    ContentRule(
        name="done",
        description="Finished work gets a checked example",
        matches=_contains_any("done", "finished", "terminé", "fini"),
        generate=_lines(
            "- [x] Example finished task",
            "",
            "*Completed tasks*",
        ),
    ),
]

EISENHOWER_RULES: list[ContentRule] = [
    ContentRule(
        name="eisenhower_do",
        description="Urgent and important: do it now",
        matches=_eisenhower(urgent=True, important=True),
        generate=_lines("- [ ] Critical task", "", "🚨 **Top priority**"),
    ),
    ContentRule(
        name="eisenhower_schedule",
        description="Important but not urgent: schedule it",
        matches=_eisenhower(urgent=False, important=True),
        generate=_lines("- [ ] Important task to plan", "", "📋 **To schedule**"),
    ),
    ContentRule(
        name="eisenhower_delegate",
        description="Urgent but not important: delegate it",
        matches=_eisenhower(urgent=True, important=False),
        generate=_lines("- [ ] Interruption to handle", "", "⏰ **To delegate**"),
    ),
    ContentRule(
        name="eisenhower_drop",
        description="Neither urgent nor important: drop it",
        matches=_eisenhower(urgent=False, important=False),
        generate=_lines("- [ ] Optional activity", "", "🗑️ **To eliminate**"),
    ),
]

FALLBACK_RULE = ContentRule(
    name="generic",
    description="Generic two item checklist",
    matches=lambda title, layout_name: True,
    generate=_lines(
        "- [ ] New item",
        "- [ ] Another item",
        "",
        "*Section added automatically*",
    ),
)


class DefaultContentRules:
    """Ordered, replaceable table of default-content rules.

    The fallback rule always runs last, so every title gets some content.
    """

    def __init__(
        self,
        rules: Iterable[ContentRule] | None = None,
        fallback: ContentRule = FALLBACK_RULE,
    ) -> None:
        self._rules: list[ContentRule] = list(
            rules if rules is not None else [*COMMON_RULES, *EISENHOWER_RULES]
        )
        self.fallback = fallback

    @property
    def rules(self) -> list[ContentRule]:
        return list(self._rules)

    def register(self, rule: ContentRule) -> ContentRule:
        """Append a rule after the existing ones (before the fallback)."""
        self._rules.append(rule)
        return rule

    def insert(self, index: int, rule: ContentRule) -> None:
        self._rules.insert(index, rule)

    def with_rules(self, rules: Iterable[ContentRule]) -> "DefaultContentRules":
        """Copy of this table with ``rules`` evaluated first."""
        return DefaultContentRules([*rules, *self._rules], fallback=self.fallback)

    def match(self, title: str, layout_name: str = "") -> ContentRule:
        """First rule accepting the title."""
        for rule in self._rules:
            if rule.matches(title, layout_name):
                return rule
        return self.fallback

    def generate(self, title: str, layout_name: str = "") -> list[str]:
        """Placeholder lines for a new section."""
        return self.match(title, layout_name).generate(title, layout_name)


DEFAULT_CONTENT_RULES = DefaultContentRules()
