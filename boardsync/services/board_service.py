"""Board service: file-level section operations.

Ties the pure components (parser, reconciler, registry) to a document store,
a metadata provider, the memo cache and a view switcher.
"""

import logging
from datetime import date
from typing import Callable

from boardsync.db.cache import MemoCache
from boardsync.dsl.schema import (
    LAYOUT_FRONTMATTER_KEY,
    AddSectionsOptions,
    AddSectionsResult,
    LayoutDefinition,
    LayoutInfo,
    NoteCreationOptions,
    NoteCreationResult,
    ParsedSection,
    ReconciliationResult,
)
from boardsync.engine.reconciler import SectionReconciler
from boardsync.errors import BoardSyncError, ValidationError
from boardsync.parser.section_parser import (
    format_section_header,
    sanitize_file_name,
    split_lines,
)
from boardsync.services.view import NullViewSwitcher, ViewSwitcher
from boardsync.storage.documents import DocumentStore
from boardsync.storage.metadata import FrontmatterMetadataProvider, MetadataProvider
from boardsync.templates.registry import LayoutRegistry, validate_layout_name

logger = logging.getLogger(__name__)

SECTIONS_CACHE_PREFIX = "sections:"


class BoardService:
    """Section management for documents held in a ``DocumentStore``."""

    def __init__(
        self,
        store: DocumentStore,
        registry: LayoutRegistry,
        metadata: MetadataProvider | None = None,
        cache: MemoCache | None = None,
        reconciler: SectionReconciler | None = None,
        view_switcher: ViewSwitcher | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.registry = registry
        self.metadata = metadata or FrontmatterMetadataProvider()
        self.cache = cache or MemoCache()
        self.reconciler = reconciler or SectionReconciler(registry)
        self.view_switcher = view_switcher or NullViewSwitcher()
        self._today = today

    @property
    def frontmatter_key(self) -> str:
        return getattr(self.metadata, "key", LAYOUT_FRONTMATTER_KEY)

    # ------------------------------------------------------------------
    # Reading

    async def parse_file_sections(self, path: str) -> list[ParsedSection]:
        """Sections of a stored document, memoized per modification stamp."""
        version = await self.store.stat(path)

        async def load() -> list[ParsedSection]:
            text = await self.store.read(path)
            return self.reconciler.parser.parse(text)

        return await self.cache.get_or_load(f"{SECTIONS_CACHE_PREFIX}{path}", version, load)

    async def detect_layout(self, path: str) -> str | None:
        """Layout name the document declares, or None."""
        text = await self.store.read(path)
        return self.metadata.get_layout_name(text)

    async def analyze_file(self, path: str) -> ReconciliationResult:
        """Diff a stored document against its declared layout.

        Raises:
            ValidationError: If the document declares no layout.
            LayoutNotFoundError: If the declared layout is unknown.
            IOFailure: If the document cannot be read.
        """
        text = await self.store.read(path)
        layout_name = self._require_layout_name(path, text)
        return self.reconciler.reconcile(text, layout_name)

    async def has_all_sections(self, path: str) -> bool:
        result = await self.analyze_file(path)
        return result.is_complete

    async def count_missing_sections(self, path: str) -> int:
        result = await self.analyze_file(path)
        return len(result.missing_sections)

    async def find_files_with_missing_sections(self) -> list[tuple[str, ReconciliationResult]]:
        """Scan every markdown document and report the incomplete ones.

        Documents without a layout, with an unknown layout, or that cannot be
        read are skipped.

        Returns:
            List of (path, result) pairs for documents missing sections.
        """
        incomplete = []
        for path in await self.store.list_markdown():
            try:
                result = await self.analyze_file(path)
            except BoardSyncError as e:
                logger.debug(f"Skipping {path}: {e}")
                continue
            if not result.is_complete:
                incomplete.append((path, result))
        logger.info(f"{len(incomplete)} document(s) with missing sections")
        return incomplete

    # ------------------------------------------------------------------
    # Writing

    async def create_missing_sections(
        self,
        path: str,
        options: AddSectionsOptions | None = None,
    ) -> AddSectionsResult:
        """Add the sections a document's layout requires but it lacks.

        The document is left untouched when anything fails.

        Args:
            path: Document path in the store.
            options: Insert position, default content and auto-save switches.

        Returns:
            AddSectionsResult describing the change.

        Raises:
            ValidationError: If the document declares no layout.
            LayoutNotFoundError: If the declared layout is unknown.
            IOFailure: If the document cannot be read or written.
            ConcurrentModificationError: If the document changed meanwhile.
        """
        options = options or AddSectionsOptions()
        text = await self.store.read(path)
        layout_name = self._require_layout_name(path, text)
        result = self.reconciler.reconcile(text, layout_name)

        if result.is_complete:
            return AddSectionsResult(
                success=True,
                new_content=text,
                messages=["All sections are already present"],
            )

        new_content = self.reconciler.apply_missing_sections(text, layout_name, options)
        messages = [f"Added {len(result.missing_sections)} section(s) to {path}"]

        if options.auto_save:
            await self._write(path, new_content, expected=text)
            self.cache.invalidate(f"{SECTIONS_CACHE_PREFIX}{path}")
            logger.info(
                f"Added sections to {path}: {', '.join(result.missing_sections)}"
            )
        else:
            messages.append("Changes not saved")

        return AddSectionsResult(
            success=True,
            sections_added=len(result.missing_sections),
            added_section_names=result.missing_sections,
            new_content=new_content,
            messages=messages,
        )

    async def update_section_content(self, path: str, section_name: str, content: str) -> bool:
        """Replace the body of the first section titled ``section_name``.

        Returns:
            True if the section was found and the document rewritten.
        """
        text = await self.store.read(path)
        sections = self.reconciler.parser.parse(text)
        target = next((s for s in sections if s.name == section_name), None)
        if target is None:
            logger.warning(f'Section "{section_name}" not found in {path}')
            return False

        lines = split_lines(text)
        after = lines[target.end_line + 1:]
        replacement = [lines[target.start_line]]
        if content.strip():
            replacement.extend(["", *split_lines(content.strip("\n"))])
        if after:
            replacement.append("")
        new_text = "\n".join(lines[:target.start_line] + replacement + after)

        await self._write(path, new_text, expected=text)
        self.cache.invalidate(f"{SECTIONS_CACHE_PREFIX}{path}")
        logger.info(f'Section "{section_name}" updated in {path}')
        return True

    async def create_note_with_layout(self, options: NoteCreationOptions) -> NoteCreationResult:
        """Create a new document with one empty section per layout block.

        An explicit file name that already exists is reused as is; generated
        names are made unique.

        Raises:
            ValidationError: If the layout name is malformed.
            LayoutNotFoundError: If the layout is unknown.
            IOFailure: If the folder or document cannot be created.
        """
        validate_layout_name(options.layout_name)
        layout = self.registry.get_or_raise(options.layout_name)
        info = self.registry.get_metadata(options.layout_name)
        display_name = info.display_name if info else options.layout_name

        folder = (options.folder or "").strip("/")
        if folder and not await self.store.exists(folder):
            await self.store.create_folder(folder)

        path = await self._note_path(display_name, folder, options.file_name)
        created = not await self.store.exists(path)
        if created:
            content = self._note_content(layout, info, options)
            await self.store.create(path, content)
            logger.info(f'Created note {path} with layout "{options.layout_name}"')
        else:
            logger.info(f"Note {path} already exists, reusing it")

        if options.auto_open:
            self.view_switcher.switch_to_board(path)

        return NoteCreationResult(
            path=path,
            layout_name=options.layout_name,
            display_name=display_name,
            sections_count=len(layout.blocks),
            created=created,
        )

    # ------------------------------------------------------------------
    # Helpers

    def _require_layout_name(self, path: str, text: str) -> str:
        layout_name = self.metadata.get_layout_name(text)
        if not layout_name:
            raise ValidationError(
                self.frontmatter_key, None, f"{path} does not declare a layout"
            )
        return layout_name

    async def _write(self, path: str, text: str, expected: str) -> None:
        if self.store.supports_compare_and_swap:
            await self.store.write_if_unchanged(path, text, expected)
        else:
            await self.store.write(path, text)

    async def _note_path(self, display_name: str, folder: str, file_name: str | None) -> str:
        def join(name: str) -> str:
            return f"{folder}/{name}" if folder else name

        if file_name:
            name = sanitize_file_name(file_name)
            if not name:
                raise ValidationError("file_name", file_name, "no usable characters")
            if not name.lower().endswith(".md"):
                name = f"{name}.md"
            return join(name)

        base = f"{sanitize_file_name(display_name)} {self._today().isoformat()}"
        candidate = join(f"{base}.md")
        counter = 2
        while await self.store.exists(candidate):
            candidate = join(f"{base} ({counter}).md")
            counter += 1
        return candidate

    def _note_content(
        self,
        layout: LayoutDefinition,
        info: LayoutInfo | None,
        options: NoteCreationOptions,
    ) -> str:
        lines = [
            "---",
            f"{self.frontmatter_key}: {options.layout_name}",
            f"created: {self._today().isoformat()}",
            f"layout-type: {info.category if info else 'custom'}",
            "---",
            "",
        ]
        if info is not None:
            lines.extend([f"# {info.display_name}", ""])
            if info.description:
                lines.extend([f"> {info.description}", ""])

        for name in layout.section_names:
            lines.extend([format_section_header(name), ""])
            custom = options.custom_content.get(name, "").strip("\n")
            if custom:
                lines.extend([*split_lines(custom), ""])

        return "\n".join(lines)
