"""Document storage and metadata collaborators."""

from boardsync.storage.documents import (
    Document,
    DocumentStore,
    InMemoryDocumentStore,
    LocalDocumentStore,
)
from boardsync.storage.metadata import (
    FrontmatterMetadataProvider,
    MetadataProvider,
    read_frontmatter,
)

__all__ = [
    "Document",
    "DocumentStore",
    "FrontmatterMetadataProvider",
    "InMemoryDocumentStore",
    "LocalDocumentStore",
    "MetadataProvider",
    "read_frontmatter",
]
