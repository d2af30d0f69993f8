"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from boardsync.db.cache import CacheConfig, MemoCache
from boardsync.engine.reconciler import SectionReconciler
from boardsync.services.board_service import BoardService
from boardsync.services.view import NullViewSwitcher
from boardsync.storage.documents import InMemoryDocumentStore
from boardsync.templates.registry import LayoutRegistry, create_default_registry


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def abc_blocks() -> list[dict]:
    """Three side-by-side blocks titled A, B and C."""
    return [
        {"title": "A", "x": 0, "y": 0, "w": 8, "h": 10},
        {"title": "B", "x": 8, "y": 0, "w": 8, "h": 10},
        {"title": "C", "x": 16, "y": 0, "w": 8, "h": 10},
    ]


@pytest.fixture
def registry(abc_blocks: list[dict]) -> LayoutRegistry:
    """Built-in layouts plus ``layout_abc``."""
    return create_default_registry({"layout_abc": abc_blocks})


@pytest.fixture
def reconciler(registry: LayoutRegistry) -> SectionReconciler:
    return SectionReconciler(registry)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> MemoCache:
    return MemoCache(CacheConfig(ttl_seconds=300, sweep_interval_seconds=60), clock=clock)


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore(
        {
            "boards/complete.md": (
                "---\nagile-board: layout_abc\n---\n\n## A\n\na\n\n## B\n\nb\n\n## C\n\nc\n"
            ),
            "boards/partial.md": "---\nagile-board: layout_abc\n---\n\n## B\n\nb body\n",
            "boards/unknown.md": "---\nagile-board: layout_missing\n---\n\n## A\n",
            "notes/plain.md": "# Just a note\n\nNo layout here.\n",
            "notes/image.png": "not markdown",
        }
    )


@pytest.fixture
def view_switcher() -> NullViewSwitcher:
    return NullViewSwitcher()


@pytest.fixture
def service(
    store: InMemoryDocumentStore,
    registry: LayoutRegistry,
    cache: MemoCache,
    reconciler: SectionReconciler,
    view_switcher: NullViewSwitcher,
) -> BoardService:
    return BoardService(
        store=store,
        registry=registry,
        cache=cache,
        reconciler=reconciler,
        view_switcher=view_switcher,
    )


@pytest.fixture
def client(
    registry: LayoutRegistry, reconciler: SectionReconciler, service: BoardService
) -> TestClient:
    """Create a test client for the FastAPI app."""
    from boardsync.api.dependencies import get_board_service, get_reconciler, get_registry
    from boardsync.api.main import app

    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_reconciler] = lambda: reconciler
    app.dependency_overrides[get_board_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()
