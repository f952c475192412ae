"""
Persistence of the canvas: graph, start/end selection and preferences.

Saved state shape:
    {
        "nodes": [{"id": 1, "name": "A", "x": 10.0, "y": 20.0}, ...],
        "edges": [{"from": 1, "to": 2, "weight": 5}, ...],
        "startId": 1 | null,
        "endId": 2 | null,
        "timestamp": 1760000000000
    }

Nothing here raises to the caller: storage and parse failures are
logged and reported as "no saved state".
"""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING, Any

from route_optimizer.config import MODE_KEY, STATE_KEY

if TYPE_CHECKING:
    from route_optimizer.graph.model import Graph
    from route_optimizer.storage.backends import KeyValueStore

logger = logging.getLogger(__name__)

# Keys written by earlier versions, mapped to their current names
LEGACY_KEYS = {
    "cities": "nodes",
    "connections": "edges",
    "startCity": "startId",
    "endCity": "endId",
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_valid_state(state: Any) -> bool:
    """
    Structural check of a loaded state before it is deserialized.

    Requires `nodes` and `edges` lists, nodes with numeric id/x/y and a
    string name, and edges with numeric from/to/weight.
    """
    if not isinstance(state, dict):
        return False

    nodes = state.get("nodes")
    edges = state.get("edges")
    if not isinstance(nodes, list) or not isinstance(edges, list):
        return False

    for node in nodes:
        if not isinstance(node, dict):
            return False
        if not all(_is_number(node.get(k)) for k in ("id", "x", "y")):
            return False
        if not isinstance(node.get("name"), str):
            return False

    for edge in edges:
        if not isinstance(edge, dict):
            return False
        if not all(_is_number(edge.get(k)) for k in ("from", "to", "weight")):
            return False

    return True


def migrate_legacy_state(state: dict[str, Any]) -> dict[str, Any]:
    """
    Bring an older saved state up to the current shape.

    Renames legacy keys and defaults missing startId/endId to None.
    Returns a new dict; the input is left untouched.
    """
    migrated = dict(state)
    for old, new in LEGACY_KEYS.items():
        if old in migrated and new not in migrated:
            migrated[new] = migrated.pop(old)
            logger.info(f"Migrated legacy state key '{old}' -> '{new}'")
    migrated.setdefault("startId", None)
    migrated.setdefault("endId", None)
    return migrated


def create_state_object(graph: Graph, start_id: int | None, end_id: int | None) -> dict[str, Any]:
    """Snapshot of the graph and route selection, ready for save_state()."""
    return {
        **graph.serialize(),
        "startId": start_id,
        "endId": end_id,
        "timestamp": int(time.time() * 1000),
    }


class StateStore:
    """
    Saves and restores the application state under a fixed key.

    Args:
        store: Backend holding the serialized JSON
        key: Key for the graph state
        mode_key: Key for the preferred implementation mode
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = STATE_KEY,
        mode_key: str = MODE_KEY,
    ) -> None:
        self._store = store
        self._key = key
        self._mode_key = mode_key

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def save_state(self, state: dict[str, Any]) -> bool:
        """
        Persist a state object.

        Returns:
            True if the state was written
        """
        try:
            self._store.set(self._key, json.dumps(state))
            return True
        except Exception as e:
            logger.error(f"Failed to save state: {e}")
            return False

    def load_state(self) -> dict[str, Any] | None:
        """Saved state (migrated to the current shape), or None if absent or unreadable."""
        try:
            raw = self._store.get(self._key)
            if raw is None:
                return None
            state = json.loads(raw)
        except Exception as e:
            logger.error(f"Failed to load state: {e}")
            return None

        if not isinstance(state, dict):
            logger.warning(f"Ignoring saved state of type {type(state).__name__}")
            return None
        return migrate_legacy_state(state)

    def clear_state(self) -> None:
        """Remove the saved state. Safe to call when nothing is saved."""
        try:
            self._store.delete(self._key)
        except Exception as e:
            logger.error(f"Failed to clear state: {e}")

    def save_mode(self, mode: str) -> bool:
        """Persist the preferred implementation mode name."""
        try:
            self._store.set(self._mode_key, json.dumps(mode))
            return True
        except Exception as e:
            logger.error(f"Failed to save implementation mode: {e}")
            return False

    def load_mode(self) -> str | None:
        """Saved implementation mode name, or None."""
        try:
            raw = self._store.get(self._mode_key)
            if raw is None:
                return None
            mode = json.loads(raw)
        except Exception as e:
            logger.error(f"Failed to load implementation mode: {e}")
            return None
        return mode if isinstance(mode, str) else None
