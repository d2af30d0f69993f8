"""Health check routes."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from boardsync.api.config import get_settings
from boardsync.api.dependencies import get_cache, get_registry
from boardsync.db.cache import MemoCache
from boardsync.templates.registry import LayoutRegistry

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: str
    version: str
    layouts: int
    cache: dict


@router.get("/health", response_model=HealthResponse)
async def health_check(
    registry: LayoutRegistry = Depends(get_registry),
    cache: MemoCache = Depends(get_cache),
):
    """Basic health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=get_settings().app_version,
        layouts=len(registry),
        cache=cache.stats(),
    )
