"""Tests for the board service."""

from datetime import date

import pytest

from boardsync.dsl.schema import AddSectionsOptions, InsertPosition, NoteCreationOptions
from boardsync.errors import (
    ConcurrentModificationError,
    IOFailure,
    LayoutNotFoundError,
    ValidationError,
)
from boardsync.parser.section_parser import parse_sections
from boardsync.services.board_service import BoardService
from boardsync.services.view import NullViewSwitcher, ViewSwitcher
from boardsync.storage.documents import InMemoryDocumentStore, LocalDocumentStore


class RacingStore(InMemoryDocumentStore):
    """Store whose document changes between the service's read and write."""

    async def read(self, path: str) -> str:
        text = await super().read(path)
        self._put(path, text + "\nedited elsewhere\n")
        return text


class TestAnalysis:
    """Read-only operations."""

    @pytest.mark.asyncio
    async def test_detect_layout(self, service: BoardService) -> None:
        assert await service.detect_layout("boards/partial.md") == "layout_abc"
        assert await service.detect_layout("notes/plain.md") is None

    @pytest.mark.asyncio
    async def test_analyze_file(self, service: BoardService) -> None:
        result = await service.analyze_file("boards/partial.md")
        assert result.missing_sections == ["A", "C"]
        assert await service.count_missing_sections("boards/partial.md") == 2
        assert not await service.has_all_sections("boards/partial.md")
        assert await service.has_all_sections("boards/complete.md")

    @pytest.mark.asyncio
    async def test_analyze_without_layout(self, service: BoardService) -> None:
        with pytest.raises(ValidationError):
            await service.analyze_file("notes/plain.md")

    @pytest.mark.asyncio
    async def test_analyze_unknown_layout(self, service: BoardService) -> None:
        with pytest.raises(LayoutNotFoundError):
            await service.analyze_file("boards/unknown.md")

    @pytest.mark.asyncio
    async def test_analyze_missing_file(self, service: BoardService) -> None:
        with pytest.raises(IOFailure):
            await service.analyze_file("boards/absent.md")

    @pytest.mark.asyncio
    async def test_find_files_with_missing_sections(self, service: BoardService) -> None:
        found = await service.find_files_with_missing_sections()
        assert [path for path, _ in found] == ["boards/partial.md"]
        assert found[0][1].missing_sections == ["A", "C"]


class TestParseCache:
    """Section parsing is memoized per document version."""

    @pytest.mark.asyncio
    async def test_cached_until_document_changes(self, service: BoardService, store) -> None:
        first = await service.parse_file_sections("boards/partial.md")
        again = await service.parse_file_sections("boards/partial.md")
        assert again is first
        assert service.cache.stats()["hits"] == 1

        await store.write("boards/partial.md", "## A\n## B\n")
        updated = await service.parse_file_sections("boards/partial.md")
        assert [s.name for s in updated] == ["A", "B"]

    @pytest.mark.asyncio
    async def test_rewrite_invalidates_entry(self, service: BoardService) -> None:
        await service.parse_file_sections("boards/partial.md")
        await service.create_missing_sections("boards/partial.md")
        assert "sections:boards/partial.md" not in service.cache
        sections = await service.parse_file_sections("boards/partial.md")
        assert [s.name for s in sections] == ["A", "B", "C"]


class TestCreateMissingSections:
    """Tests for rewriting stored documents."""

    @pytest.mark.asyncio
    async def test_adds_and_saves(self, service: BoardService, store) -> None:
        result = await service.create_missing_sections("boards/partial.md")
        assert result.success
        assert result.sections_added == 2
        assert result.added_section_names == ["A", "C"]
        saved = await store.read("boards/partial.md")
        assert saved == result.new_content
        assert saved.startswith("---\nagile-board: layout_abc\n---\n")
        assert [s.name for s in parse_sections(saved)] == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_without_auto_save(self, service: BoardService, store) -> None:
        before = await store.read("boards/partial.md")
        result = await service.create_missing_sections(
            "boards/partial.md", AddSectionsOptions(auto_save=False)
        )
        assert result.sections_added == 2
        assert await store.read("boards/partial.md") == before

    @pytest.mark.asyncio
    async def test_insert_position(self, service: BoardService, store) -> None:
        await service.create_missing_sections(
            "boards/partial.md",
            AddSectionsOptions(insert_position=InsertPosition.END, add_default_content=False),
        )
        saved = await store.read("boards/partial.md")
        assert [s.name for s in parse_sections(saved)] == ["B", "A", "C"]

    @pytest.mark.asyncio
    async def test_complete_document_is_untouched(self, service: BoardService, store) -> None:
        before_version = await store.stat("boards/complete.md")
        result = await service.create_missing_sections("boards/complete.md")
        assert result.success
        assert result.sections_added == 0
        assert await store.stat("boards/complete.md") == before_version

    @pytest.mark.asyncio
    async def test_unknown_layout_leaves_document(self, service: BoardService, store) -> None:
        before = await store.read("boards/unknown.md")
        with pytest.raises(LayoutNotFoundError):
            await service.create_missing_sections("boards/unknown.md")
        assert await store.read("boards/unknown.md") == before

    @pytest.mark.asyncio
    async def test_concurrent_modification_detected(self, registry) -> None:
        store = RacingStore({"b.md": "---\nagile-board: layout_abc\n---\n## A\n"})
        service = BoardService(store, registry)
        with pytest.raises(ConcurrentModificationError):
            await service.create_missing_sections("b.md")
        assert "edited elsewhere" in store._documents["b.md"][0]

    @pytest.mark.asyncio
    async def test_local_store(self, tmp_path, registry) -> None:
        (tmp_path / "board.md").write_text("---\nagile-board: layout_kanban\n---\n## Done\n")
        service = BoardService(LocalDocumentStore(tmp_path), registry)
        result = await service.create_missing_sections("board.md")
        assert result.added_section_names == ["To Do", "In Progress"]
        assert "## To Do" in (tmp_path / "board.md").read_text()


class TestUpdateSectionContent:
    """Tests for replacing a section body."""

    @pytest.mark.asyncio
    async def test_replaces_body(self, service: BoardService, store) -> None:
        assert await service.update_section_content("boards/complete.md", "B", "new b\nmore")
        saved = await store.read("boards/complete.md")
        sections = {s.name: s.content for s in parse_sections(saved)}
        assert sections == {"A": "a", "B": "new b\nmore", "C": "c"}
        assert "\n## B\n\nnew b\nmore\n\n## C\n" in saved

    @pytest.mark.asyncio
    async def test_last_section(self, service: BoardService, store) -> None:
        await service.update_section_content("boards/complete.md", "C", "last")
        assert (await store.read("boards/complete.md")).endswith("## C\n\nlast")

    @pytest.mark.asyncio
    async def test_unknown_section(self, service: BoardService, store) -> None:
        before = await store.read("boards/complete.md")
        assert not await service.update_section_content("boards/complete.md", "Z", "x")
        assert await store.read("boards/complete.md") == before


class TestCreateNote:
    """Tests for creating notes from layouts."""

    @pytest.fixture
    def note_service(self, store, registry, view_switcher) -> BoardService:
        return BoardService(
            store, registry, view_switcher=view_switcher, today=lambda: date(2024, 3, 1)
        )

    @pytest.mark.asyncio
    async def test_creates_note(self, note_service: BoardService, store, view_switcher) -> None:
        result = await note_service.create_note_with_layout(
            NoteCreationOptions(layout_name="layout_kanban", folder="boards")
        )
        assert result.created
        assert result.path == "boards/Kanban Board 2024-03-01.md"
        assert result.display_name == "Kanban Board"
        assert result.sections_count == 3
        assert list(view_switcher.opened) == [result.path]

        text = await store.read(result.path)
        assert text.startswith("---\nagile-board: layout_kanban\ncreated: 2024-03-01\n")
        assert "# Kanban Board" in text
        assert [s.name for s in parse_sections(text)] == ["To Do", "In Progress", "Done"]
        assert await note_service.has_all_sections(result.path)

    @pytest.mark.asyncio
    async def test_generated_names_are_unique(self, note_service: BoardService) -> None:
        options = NoteCreationOptions(layout_name="layout_simple", auto_open=False)
        first = await note_service.create_note_with_layout(options)
        second = await note_service.create_note_with_layout(options)
        assert first.path == "Simple Board 2024-03-01.md"
        assert second.path == "Simple Board 2024-03-01 (2).md"
        assert second.created

    @pytest.mark.asyncio
    async def test_custom_content_and_file_name(self, note_service: BoardService, store) -> None:
        result = await note_service.create_note_with_layout(
            NoteCreationOptions(
                layout_name="layout_simple",
                file_name="My: ideas",
                custom_content={"Ideas": "- first idea"},
                auto_open=False,
            )
        )
        assert result.path == "My ideas.md"
        sections = {s.name: s.content for s in parse_sections(await store.read(result.path))}
        assert sections == {"Ideas": "- first idea", "Actions": ""}

    @pytest.mark.asyncio
    async def test_existing_file_is_reused(self, note_service: BoardService, store) -> None:
        await store.create("mine.md", "keep me")
        result = await note_service.create_note_with_layout(
            NoteCreationOptions(layout_name="layout_simple", file_name="mine")
        )
        assert not result.created
        assert await store.read("mine.md") == "keep me"

    @pytest.mark.asyncio
    async def test_invalid_layout_name(self, note_service: BoardService) -> None:
        with pytest.raises(ValidationError):
            await note_service.create_note_with_layout(NoteCreationOptions(layout_name="kanban"))

    @pytest.mark.asyncio
    async def test_unknown_layout(self, note_service: BoardService) -> None:
        with pytest.raises(LayoutNotFoundError):
            await note_service.create_note_with_layout(
                NoteCreationOptions(layout_name="layout_unknown")
            )


class TestViewSwitcher:
    """Tests for the headless view switcher."""

    def test_history_is_bounded(self) -> None:
        switcher = NullViewSwitcher(history=2)
        for path in ("a.md", "b.md", "c.md"):
            switcher.switch_to_board(path)
        assert list(switcher.opened) == ["b.md", "c.md"]
        assert switcher.last_opened == "c.md"

    def test_satisfies_protocol(self) -> None:
        assert isinstance(NullViewSwitcher(), ViewSwitcher)
        assert NullViewSwitcher().last_opened is None
