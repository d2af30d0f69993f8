"""API routes for boardsync."""

from fastapi import APIRouter

from boardsync.api.routes.files import router as files_router
from boardsync.api.routes.layouts import router as layouts_router
from boardsync.api.routes.sections import router as sections_router

# Main API router
api_router = APIRouter()

api_router.include_router(layouts_router, prefix="/layouts", tags=["Layouts"])
api_router.include_router(sections_router, prefix="/sections", tags=["Sections"])
api_router.include_router(files_router, prefix="/files", tags=["Files"])

__all__ = ["api_router"]
