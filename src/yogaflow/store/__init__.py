"""Pose catalog access and sequence persistence."""

from __future__ import annotations

from typing import TYPE_CHECKING

from yogaflow.store.base import SequenceStore
from yogaflow.store.importer import STARTER_CATALOG, load_pose_file
from yogaflow.store.memory import MemoryStore
from yogaflow.store.sqlalchemy_store import SqlStore

if TYPE_CHECKING:
    from yogaflow.config import DatabaseSettings

__all__ = [
    "STARTER_CATALOG",
    "MemoryStore",
    "SequenceStore",
    "SqlStore",
    "create_store",
    "load_pose_file",
]


def create_store(settings: DatabaseSettings) -> SqlStore:
    """Open the configured database and make sure its tables exist."""
    store = SqlStore(settings.url, echo=settings.echo)
    store.create_all()
    return store
