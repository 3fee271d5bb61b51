"""Ports implemented by external collaborators (the mutation layer)."""
from __future__ import annotations

from typing import Any, Dict, Protocol

from node_engine.domain.entities import ResourceEntity


class MutationPort(Protocol):
    """Persistence side of the engine. The engine only delivers intents;
    retries, optimistic updates and failure reconciliation live behind this port."""

    def update_metadata(self, node_id: str, metadata: Dict[str, Any]) -> None:
        """Replace the node's metadata with ``metadata``."""
        ...

    def cycle_status(self, resource: ResourceEntity) -> None:
        """Advance the resource to its next status."""
        ...

    def move_node(self, node_id: str, new_parent_id: str, old_parent_id: str | None) -> None:
        ...

    def create_node(
        self, parent_id: str, node_type: str, title: str, metadata: Dict[str, Any]
    ) -> None:
        ...

    def handle_custom(self, node_id: str, action: str, target: str | None, payload: Any) -> None:
        """Forward-compatible hook for data-described actions the engine does not know."""
        ...
