"""View switching capability."""

import logging
from collections import deque
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

OPENED_HISTORY = 50


@runtime_checkable
class ViewSwitcher(Protocol):
    """Something able to show a document as a board."""

    def switch_to_board(self, path: str) -> None:
        ...


class NullViewSwitcher:
    """View switcher for headless use; only records the latest requests."""

    def __init__(self, history: int = OPENED_HISTORY) -> None:
        self.opened: deque[str] = deque(maxlen=history)

    @property
    def last_opened(self) -> str | None:
        return self.opened[-1] if self.opened else None

    def switch_to_board(self, path: str) -> None:
        logger.debug(f"Board view requested for {path}")
        self.opened.append(path)
