"""Metadata providers: find the layout a document declares."""

import logging
from abc import ABC, abstractmethod

import yaml

from boardsync.dsl.schema import LAYOUT_FRONTMATTER_KEY

logger = logging.getLogger(__name__)


class MetadataProvider(ABC):
    """Associates documents with layout names."""

    @abstractmethod
    def get_layout_name(self, text: str) -> str | None:
        """Layout name declared by the document, or None."""


def read_frontmatter(text: str) -> dict | None:
    """Parse the YAML front matter block at the top of a document.

    Returns:
        The front matter mapping, or None when there is none or it is invalid.
    """
    lines = text.split("\n")
    if not lines or lines[0].strip() != "---":
        return None

    for index in range(1, len(lines)):
        if lines[index].strip() == "---":
            block = "\n".join(lines[1:index])
            break
    else:
        return None

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        logger.debug(f"Ignoring invalid front matter: {e}")
        return None
    return data if isinstance(data, dict) else None


class FrontmatterMetadataProvider(MetadataProvider):
    """Reads the layout name from a front matter key."""

    def __init__(self, key: str = LAYOUT_FRONTMATTER_KEY) -> None:
        self.key = key

    def get_layout_name(self, text: str) -> str | None:
        frontmatter = read_frontmatter(text)
        if not frontmatter:
            return None
        value = frontmatter.get(self.key)
        if value is None:
            return None
        value = str(value).strip()
        return value or None
