"""
Storage module.

Provides persistence for the canvas state:
- KeyValueStore: Backend protocol
- MemoryStore / FileStore: Backends
- StateStore: Save/load/clear of the graph and route selection
- is_valid_state: Structural validation before deserializing
"""

from route_optimizer.storage.backends import FileStore, KeyValueStore, MemoryStore
from route_optimizer.storage.state import (
    StateStore,
    create_state_object,
    is_valid_state,
    migrate_legacy_state,
)

__all__ = [
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
    "StateStore",
    "create_state_object",
    "is_valid_state",
    "migrate_legacy_state",
]
