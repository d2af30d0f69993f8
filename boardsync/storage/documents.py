"""Document store collaborators.

Stores address documents by relative, slash-separated paths. Every read or
write failure surfaces as ``IOFailure`` carrying the path and the cause.
"""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from boardsync.errors import ConcurrentModificationError, IOFailure, ValidationError
from boardsync.parser.section_parser import is_markdown_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Document:
    """A stored document."""

    path: str
    version: float

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def folder(self) -> str:
        return self.path.rsplit("/", 1)[0] if "/" in self.path else ""


class DocumentStore(ABC):
    """Read/write access to board documents."""

    supports_compare_and_swap = False

    @abstractmethod
    async def read(self, path: str) -> str:
        """Return the text of a document."""

    @abstractmethod
    async def write(self, path: str, text: str) -> None:
        """Replace the text of an existing document."""

    @abstractmethod
    async def exists(self, path: str) -> bool:
        ...

    @abstractmethod
    async def create(self, path: str, text: str) -> Document:
        """Create a new document; fails if the path is taken."""

    @abstractmethod
    async def create_folder(self, path: str) -> None:
        ...

    @abstractmethod
    async def stat(self, path: str) -> float:
        """Monotonic modification stamp of a document."""

    @abstractmethod
    async def list_markdown(self) -> list[str]:
        """Paths of every markdown document in the store."""

    async def write_if_unchanged(self, path: str, text: str, expected: str) -> None:
        """Write only if the document still holds ``expected``.

        Raises:
            ConcurrentModificationError: If the document changed.
        """
        raise NotImplementedError


class LocalDocumentStore(DocumentStore):
    """Documents on the local file system, under a root directory."""

    supports_compare_and_swap = True

    def __init__(self, root: Path | str, encoding: str = "utf-8") -> None:
        self.root = Path(root)
        self.encoding = encoding

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if not target.is_relative_to(self.root.resolve()):
            raise ValidationError("path", path, "outside the document root")
        return target

    async def read(self, path: str) -> str:
        try:
            return self._resolve(path).read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise IOFailure(path, e, "read") from e

    async def write(self, path: str, text: str) -> None:
        target = self._resolve(path)
        # Temp file plus replace: a failed write leaves the document as it was.
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding=self.encoding, newline="") as f:
                f.write(text)
            os.replace(tmp_name, target)
            tmp_name = None
        except OSError as e:
            raise IOFailure(path, e, "write") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
        logger.info(f"Wrote {path} ({len(text)} chars)")

    async def write_if_unchanged(self, path: str, text: str, expected: str) -> None:
        current = await self.read(path)
        if current != expected:
            raise ConcurrentModificationError(path)
        await self.write(path, text)

    async def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    async def create(self, path: str, text: str) -> Document:
        target = self._resolve(path)
        try:
            with open(target, "x", encoding=self.encoding, newline="") as f:
                f.write(text)
        except OSError as e:
            raise IOFailure(path, e, "create") from e
        logger.info(f"Created {path}")
        return Document(path=path, version=target.stat().st_mtime_ns)

    async def create_folder(self, path: str) -> None:
        try:
            self._resolve(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IOFailure(path, e, "create folder") from e

    async def stat(self, path: str) -> float:
        try:
            return self._resolve(path).stat().st_mtime_ns
        except OSError as e:
            raise IOFailure(path, e, "stat") from e

    async def list_markdown(self) -> list[str]:
        if not self.root.exists():
            return []
        return sorted(
            p.relative_to(self.root).as_posix()
            for p in self.root.rglob("*")
            if p.is_file() and is_markdown_file(p.name)
        )


class InMemoryDocumentStore(DocumentStore):
    """Dictionary-backed store; versions come from a write counter."""

    supports_compare_and_swap = True

    def __init__(self, documents: dict[str, str] | None = None) -> None:
        self._documents: dict[str, tuple[str, int]] = {}
        self._folders: set[str] = set()
        self._counter = 0
        for path, text in (documents or {}).items():
            self._put(path, text)

    def _put(self, path: str, text: str) -> int:
        self._counter += 1
        self._documents[path] = (text, self._counter)
        return self._counter

    def _get(self, path: str, operation: str) -> tuple[str, int]:
        try:
            return self._documents[path]
        except KeyError as e:
            raise IOFailure(path, FileNotFoundError(path), operation) from e

    async def read(self, path: str) -> str:
        return self._get(path, "read")[0]

    async def write(self, path: str, text: str) -> None:
        self._get(path, "write")
        self._put(path, text)

    async def write_if_unchanged(self, path: str, text: str, expected: str) -> None:
        if self._get(path, "write")[0] != expected:
            raise ConcurrentModificationError(path)
        self._put(path, text)

    async def exists(self, path: str) -> bool:
        return path in self._documents or path in self._folders

    async def create(self, path: str, text: str) -> Document:
        if path in self._documents:
            raise IOFailure(path, FileExistsError(path), "create")
        return Document(path=path, version=self._put(path, text))

    async def create_folder(self, path: str) -> None:
        self._folders.add(path)

    async def stat(self, path: str) -> float:
        return self._get(path, "stat")[1]

    async def list_markdown(self) -> list[str]:
        return sorted(path for path in self._documents if is_markdown_file(path))
