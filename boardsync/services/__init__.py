"""Application services."""

from boardsync.services.board_service import BoardService
from boardsync.services.view import NullViewSwitcher, ViewSwitcher

__all__ = [
    "BoardService",
    "NullViewSwitcher",
    "ViewSwitcher",
]
