"""Versioned state stores: in-memory, filesystem and SQLite backends."""

from ..config.loader import StoreConfig
from .base import DEFAULT_MAX_VERSIONS, StateStore
from .filesystem import FileSystemStateStore
from .memory import InMemoryStateStore
from .sqlite import SqliteStateStore


def create_state_store(config: StoreConfig) -> StateStore:
    """Build the backend named in config."""
    if config.backend == "memory":
        return InMemoryStateStore(max_versions=config.max_versions)
    if config.backend == "file":
        return FileSystemStateStore(config.base_path, max_versions=config.max_versions)
    if config.backend == "sqlite":
        return SqliteStateStore(config.db_path, max_versions=config.max_versions)
    raise ValueError(f"Unknown state store backend: {config.backend}")


__all__ = [
    "DEFAULT_MAX_VERSIONS",
    "StateStore",
    "InMemoryStateStore",
    "FileSystemStateStore",
    "SqliteStateStore",
    "create_state_store",
]
