"""FastAPI dependencies: shared registry, reconciler, cache and board service."""

import logging
from functools import lru_cache

from boardsync.api.config import get_settings
from boardsync.db.cache import CacheConfig, MemoCache
from boardsync.engine.reconciler import SectionReconciler
from boardsync.services.board_service import BoardService
from boardsync.storage.documents import LocalDocumentStore
from boardsync.storage.metadata import FrontmatterMetadataProvider
from boardsync.templates.library import load_layout_file
from boardsync.templates.registry import LayoutRegistry, create_default_registry

logger = logging.getLogger(__name__)


@lru_cache()
def get_registry() -> LayoutRegistry:
    """Registry with the built-in layouts plus the configured layout file."""
    settings = get_settings()
    extra = None
    if settings.has_layouts_file:
        extra = load_layout_file(settings.layouts_file)
        logger.info(f"Loaded {len(extra)} layout(s) from {settings.layouts_file}")
    return create_default_registry(extra)


@lru_cache()
def get_metadata_provider() -> FrontmatterMetadataProvider:
    return FrontmatterMetadataProvider(get_settings().frontmatter_key)


@lru_cache()
def get_reconciler() -> SectionReconciler:
    return SectionReconciler(get_registry())


@lru_cache()
def get_cache() -> MemoCache:
    settings = get_settings()
    return MemoCache(
        CacheConfig(
            ttl_seconds=settings.cache_ttl_seconds,
            sweep_interval_seconds=settings.cache_sweep_seconds,
        )
    )


@lru_cache()
def get_board_service() -> BoardService:
    """Board service over the configured document root."""
    return BoardService(
        store=LocalDocumentStore(get_settings().document_root),
        registry=get_registry(),
        metadata=get_metadata_provider(),
        cache=get_cache(),
        reconciler=get_reconciler(),
    )
