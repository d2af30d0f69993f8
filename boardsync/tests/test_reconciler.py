"""Tests for section reconciliation and rewriting."""

import pytest

from boardsync.dsl.schema import AddSectionsOptions, InsertPosition
from boardsync.engine.default_content import DefaultContentRules
from boardsync.engine.reconciler import SectionReconciler
from boardsync.errors import LayoutNotFoundError
from boardsync.parser.section_parser import parse_sections
from boardsync.templates.registry import LayoutRegistry

GENERIC = "- [ ] New item\n- [ ] Another item\n\n*Section added automatically*"
FRONTMATTER = "---\nagile-board: layout_abc\n---\n"


def _bare(position: InsertPosition = InsertPosition.LAYOUT_ORDER) -> AddSectionsOptions:
    return AddSectionsOptions(insert_position=position, add_default_content=False)


class TestReconcile:
    """Tests for diffing documents against layouts."""

    def test_missing_and_extra(self, reconciler: SectionReconciler) -> None:
        result = reconciler.reconcile("## Z\nzz\n## B\nb\n", "layout_abc")
        assert result.layout_name == "layout_abc"
        assert result.missing_sections == ["A", "C"]
        assert result.extra_sections == ["Z"]
        assert result.correct_order == ["A", "B", "C"]
        assert result.existing_section_names == ["Z", "B"]
        assert not result.is_complete

    def test_missing_and_extra_are_disjoint(self, reconciler: SectionReconciler) -> None:
        result = reconciler.reconcile("## A\n## Q\n## Q\n## C\n", "layout_abc")
        assert not set(result.missing_sections) & set(result.extra_sections)
        assert result.extra_sections == ["Q"]

    def test_complete_document(self, reconciler: SectionReconciler) -> None:
        result = reconciler.reconcile("## C\n## B\n## A\n", "layout_abc")
        assert result.is_complete
        assert result.extra_sections == []

    def test_duplicates_reported(self, reconciler: SectionReconciler, caplog) -> None:
        result = reconciler.reconcile("## A\none\n## A\ntwo\n", "layout_abc")
        assert result.duplicate_sections == ["A"]
        assert "repeats section" in caplog.text

    def test_unknown_layout(self, reconciler: SectionReconciler) -> None:
        with pytest.raises(LayoutNotFoundError):
            reconciler.reconcile("## A\n", "layout_nope")


class TestLayoutOrder:
    """Tests for the layout-order insert policy."""

    def test_adds_missing_section_with_placeholder(self, reconciler: SectionReconciler) -> None:
        text = "# Title\n## A\ncontent A\n## B\ncontent B\n"
        output = reconciler.apply_missing_sections(text, "layout_abc")
        assert output == (
            "# Title\n\n## A\n\ncontent A\n\n## B\n\ncontent B\n\n## C\n\n" + GENERIC + "\n"
        )
        assert [s.name for s in parse_sections(output)] == ["A", "B", "C"]

    def test_reorders_to_layout_and_appends_extras(self, reconciler: SectionReconciler) -> None:
        text = "## Z\nzz\n## C\nc\n## A\na\n"
        output = reconciler.apply_missing_sections(text, "layout_abc", _bare())
        assert output == "## A\n\na\n\n## B\n\n## C\n\nc\n\n## Z\n\nzz\n"

    def test_keeps_every_duplicate(self, reconciler: SectionReconciler) -> None:
        output = reconciler.apply_missing_sections("## A\none\n## A\ntwo\n", "layout_abc", _bare())
        assert output == "## A\n\none\n\n## A\n\ntwo\n\n## B\n\n## C\n"

    def test_keeps_front_matter_and_intro(self, reconciler: SectionReconciler) -> None:
        text = FRONTMATTER + "\nIntro line.\n\n## B\nb\n"
        output = reconciler.apply_missing_sections(text, "layout_abc", _bare())
        assert output == FRONTMATTER + "\nIntro line.\n\n## A\n\n## B\n\nb\n\n## C\n"

    def test_empty_document(self, reconciler: SectionReconciler) -> None:
        output = reconciler.apply_missing_sections("", "layout_abc", _bare())
        assert output == "## A\n\n## B\n\n## C\n"

    def test_second_pass_finds_nothing_missing(self, reconciler: SectionReconciler) -> None:
        text = FRONTMATTER + "## Z\nzz\n## B\nb\n"
        first = reconciler.apply_missing_sections(text, "layout_abc")
        result = reconciler.reconcile(first, "layout_abc")
        assert result.missing_sections == []
        assert result.extra_sections == ["Z"]

    @pytest.mark.parametrize(
        "text",
        [
            "# Title\n## A\ncontent A\n## B\ncontent B\n",
            FRONTMATTER + "\nIntro.\n## Z\nzz\n\n\n## C\n\nc\n",
            "## A\none\n## A\ntwo\n",
        ],
    )
    def test_output_is_a_fixed_point(self, reconciler: SectionReconciler, text: str) -> None:
        first = reconciler.apply_missing_sections(text, "layout_abc")
        assert reconciler.apply_missing_sections(first, "layout_abc") == first

    def test_does_not_mutate_input(self, reconciler: SectionReconciler) -> None:
        text = "## B\nb\n"
        reconciler.apply_missing_sections(text, "layout_abc")
        assert text == "## B\nb\n"


class TestOtherPolicies:
    """Tests for the end and after-frontmatter insert policies."""

    def test_end_appends_after_verbatim_document(self, reconciler: SectionReconciler) -> None:
        text = "# Title\n## A\ncontent A\n## B\ncontent B\n"
        output = reconciler.apply_missing_sections(text, "layout_abc", _bare(InsertPosition.END))
        assert output == "# Title\n## A\ncontent A\n## B\ncontent B\n\n## C\n"

    def test_end_keeps_order(self, reconciler: SectionReconciler) -> None:
        text = "## C\nc\n## Z\n"
        output = reconciler.apply_missing_sections(text, "layout_abc", _bare(InsertPosition.END))
        assert [s.name for s in parse_sections(output)] == ["C", "Z", "A", "B"]

    def test_after_frontmatter(self, reconciler: SectionReconciler) -> None:
        text = FRONTMATTER + "## B\nbody b\n"
        output = reconciler.apply_missing_sections(
            text, "layout_abc", _bare(InsertPosition.AFTER_FRONTMATTER)
        )
        assert output == FRONTMATTER + "\n## A\n\n## C\n\n## B\nbody b\n"

    def test_after_frontmatter_without_front_matter(self, reconciler: SectionReconciler) -> None:
        output = reconciler.apply_missing_sections(
            "## C\nc\n", "layout_abc", _bare(InsertPosition.AFTER_FRONTMATTER)
        )
        assert output == "## A\n\n## B\n\n## C\nc\n"

    @pytest.mark.parametrize("position", list(InsertPosition))
    def test_every_policy_completes_document(
        self, reconciler: SectionReconciler, position: InsertPosition
    ) -> None:
        text = FRONTMATTER + "Intro.\n## Z\nzz\n## B\nb\n"
        output = reconciler.apply_missing_sections(
            text, "layout_abc", AddSectionsOptions(insert_position=position)
        )
        names = [s.name for s in parse_sections(output)]
        assert set(names) >= {"A", "B", "C", "Z"}
        assert "Intro." in output
        assert output.startswith(FRONTMATTER)


class TestDefaultContent:
    """Placeholder content in added sections."""

    def test_kanban_placeholders(self, registry: LayoutRegistry) -> None:
        reconciler = SectionReconciler(registry)
        output = reconciler.apply_missing_sections("## In Progress\nwip\n", "layout_kanban")
        sections = {s.name: s.content for s in parse_sections(output)}
        assert sections["To Do"] == "- [ ] New task\n- [ ] Another important task"
        assert sections["In Progress"] == "wip"
        assert sections["Done"].startswith("- [x] Example finished task")

    def test_custom_rules(self, registry: LayoutRegistry) -> None:
        reconciler = SectionReconciler(registry, content_rules=DefaultContentRules(rules=[]))
        output = reconciler.apply_missing_sections("", "layout_kanban")
        assert output.count("*Section added automatically*") == 3

    def test_default_content_disabled(self, reconciler: SectionReconciler) -> None:
        output = reconciler.apply_missing_sections("## A\n", "layout_abc", _bare())
        assert "New item" not in output


class TestUnusualLayouts:
    """Layouts with hash-prefixed, padded or repeated titles."""

    def test_hash_prefixed_title_is_found_again(self) -> None:
        registry = LayoutRegistry({
            "layout_ranked": [
                {"title": "#1 Priority", "x": 0, "y": 0, "w": 12, "h": 10},
                {"title": "B", "x": 12, "y": 0, "w": 12, "h": 10},
            ]
        })
        reconciler = SectionReconciler(registry)

        first = reconciler.apply_missing_sections("", "layout_ranked")
        assert first.startswith("## #1 Priority\n")
        assert reconciler.reconcile(first, "layout_ranked").missing_sections == []
        assert reconciler.apply_missing_sections(first, "layout_ranked") == first

    @pytest.mark.parametrize("title", ["A ", " A", ""])
    def test_title_that_cannot_be_read_back_is_rejected(self, title: str) -> None:
        registry = LayoutRegistry({
            "layout_padded": [{"title": title, "x": 0, "y": 0, "w": 12, "h": 10}]
        })
        assert "layout_padded" not in registry
        with pytest.raises(LayoutNotFoundError):
            SectionReconciler(registry).apply_missing_sections("", "layout_padded")

    def test_repeated_layout_title_keeps_content_once(self) -> None:
        registry = LayoutRegistry({
            "layout_twice": [
                {"title": "A", "x": 0, "y": 0, "w": 8, "h": 10},
                {"title": "A", "x": 8, "y": 0, "w": 8, "h": 10},
                {"title": "B", "x": 16, "y": 0, "w": 8, "h": 10},
            ]
        })
        reconciler = SectionReconciler(registry)

        output = reconciler.apply_missing_sections("## A\nkeep me\n", "layout_twice", _bare())
        assert output == "## A\n\nkeep me\n\n## B\n"
        assert output.count("keep me") == 1

    def test_repeated_layout_title_listed_missing_once(self) -> None:
        registry = LayoutRegistry({
            "layout_twice": [
                {"title": "A", "x": 0, "y": 0, "w": 8, "h": 10},
                {"title": "A", "x": 8, "y": 0, "w": 8, "h": 10},
            ]
        })
        reconciler = SectionReconciler(registry)

        assert reconciler.reconcile("", "layout_twice").missing_sections == ["A"]
        assert reconciler.apply_missing_sections("", "layout_twice", _bare()) == "## A\n"
