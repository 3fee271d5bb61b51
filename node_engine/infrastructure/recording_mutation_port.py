"""In-memory mutation port that records every intent it receives."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from node_engine.domain.entities import ResourceEntity
from node_engine.domain.errors import ConflictError
from node_engine.engine.behavior import DEFAULT_STATUS_CYCLE, next_status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MutationRecord:
    kind: str
    node_id: str
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "node_id": self.node_id, "payload": self.payload}


class RecordingMutationPort:
    """Mutation layer stand-in for previews, the HTTP surface and tests.

    Nothing is persisted; intents are appended to ``records`` in delivery
    order so callers can inspect exactly what the engine asked for.
    """

    def __init__(self, status_cycle: Sequence[str] = DEFAULT_STATUS_CYCLE) -> None:
        self._status_cycle = tuple(status_cycle)
        self._records: List[MutationRecord] = []
        self._lock = threading.Lock()

    @property
    def records(self) -> List[MutationRecord]:
        with self._lock:
            return list(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def update_metadata(self, node_id: str, metadata: Dict[str, Any]) -> None:
        self._record("update_metadata", node_id, {"metadata": dict(metadata)})

    def cycle_status(self, resource: ResourceEntity) -> None:
        current = resource.get("status")
        status = next_status(current, self._status_cycle)
        self._record("cycle_status", resource["id"], {"from": current, "to": status})

    def move_node(self, node_id: str, new_parent_id: str, old_parent_id: Optional[str]) -> None:
        if new_parent_id == node_id:
            raise ConflictError(f"Cannot move node {node_id} under itself")
        self._record("move_node", node_id, {"new_parent_id": new_parent_id, "old_parent_id": old_parent_id})

    def create_node(self, parent_id: str, node_type: str, title: str, metadata: Dict[str, Any]) -> None:
        self._record(
            "create_node", parent_id, {"node_type": node_type, "title": title, "metadata": dict(metadata)}
        )

    def handle_custom(self, node_id: str, action: str, target: Optional[str], payload: Any) -> None:
        self._record("custom", node_id, {"action": action, "target": target, "payload": payload})

    def _record(self, kind: str, node_id: str, payload: Dict[str, Any]) -> None:
        logger.debug(f"Recorded {kind} for node {node_id}")
        with self._lock:
            self._records.append(MutationRecord(kind=kind, node_id=node_id, payload=payload))
