"""Generated content records (the dashboard's JSON files)."""

from rcb.content.library import ContentLibrary
from rcb.content.store import (
    ContentRecord,
    ContentStore,
    InMemoryContentStore,
    PostgresContentStore,
    build_content_store,
)

__all__ = [
    "ContentLibrary",
    "ContentRecord",
    "ContentStore",
    "InMemoryContentStore",
    "PostgresContentStore",
    "build_content_store",
]
