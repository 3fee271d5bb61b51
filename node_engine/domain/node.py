"""Unified Node model.

A Node is a recursive, immutable value object:

- ``type`` says WHAT the node is (coarse category, used only as a fallback selector)
- ``variant`` says HOW it is rendered (key into the variant registry)
- ``metadata`` carries the domain payload (status, color, chart series, ...)
- ``children`` nests nodes in render order
- ``relationships`` are lateral, non-owning references used as navigation hints
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


class NodeType(str, Enum):
    """Abstract node categories mapped from backend resource types."""
    SPACE = "space"
    CONTAINER = "container"
    COLLECTION = "collection"
    ITEM = "item"


class RelationshipType(str, Enum):
    """Lateral link types, mirroring the backend link table."""
    HIERARCHY = "HIERARCHY"
    COMPONENT = "COMPONENT"
    DEPENDENCY = "DEPENDENCY"
    TRANSACTIONAL = "TRANSACTIONAL"
    SPATIAL = "SPATIAL"
    TEMPORAL = "TEMPORAL"
    SOCIAL = "SOCIAL"
    REFERENCE = "REFERENCE"


# Backend resource type -> abstract node type
RESOURCE_TYPE_TO_NODE_TYPE: Dict[str, NodeType] = {
    "folder": NodeType.CONTAINER,
    "project": NodeType.COLLECTION,
    "task": NodeType.ITEM,
    "recipe": NodeType.ITEM,
    "ingredient": NodeType.ITEM,
    "stock_item": NodeType.ITEM,
    "workout": NodeType.ITEM,
    "exercise": NodeType.ITEM,
    "document": NodeType.ITEM,
    "event": NodeType.ITEM,
}


class NodeRelationship(BaseModel):
    """Non-owning reference to another node elsewhere in the forest."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    target_id: str = Field(..., alias="targetId", min_length=1, description="Id of the referenced node")
    type: RelationshipType = Field(..., description="Kind of lateral link")
    meta: Optional[Dict[str, Any]] = Field(None, description="Link payload (e.g. quantity)")


class Node(BaseModel):
    """The universal recursive content unit rendered by the engine."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1, description="Globally unique identifier")
    type: NodeType = Field(..., description="Coarse semantic category")
    variant: str = Field(..., min_length=1, description="Renderer key")
    title: str = Field(..., min_length=1, description="Display name")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Domain payload")
    children: Optional[List[Node]] = Field(None, description="Owned child nodes in render order")
    relationships: Optional[List[NodeRelationship]] = Field(None, description="Lateral links")
    pointer_table: Optional[str] = Field(None, description="Hybrid data pointer: strict table name")
    pointer_id: Optional[str] = Field(None, description="Hybrid data pointer: row id")
    duration_minutes: Optional[int] = Field(None, description="Time-blocking duration")

    @field_validator("metadata", mode="before")
    @classmethod
    def _metadata_never_null(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def child_nodes(self) -> List[Node]:
        return list(self.children or [])

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def meta(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


Node.model_rebuild()


def iter_nodes(root: Node) -> Iterator[Node]:
    """Yield every node depth-first, children in array order."""
    yield root
    for child in root.children or []:
        yield from iter_nodes(child)


def count_nodes(root: Optional[Node]) -> int:
    if root is None:
        return 0
    return sum(1 for _ in iter_nodes(root))


def find_node_by_id(root: Optional[Node], node_id: Optional[str]) -> Optional[Node]:
    """Depth-first search for a node by id."""
    if root is None or node_id is None:
        return None
    for node in iter_nodes(root):
        if node.id == node_id:
            return node
    return None


def find_path_to_node(root: Node, target_id: str) -> Optional[List[str]]:
    """Return the ids from ``root`` to ``target_id`` inclusive, or None if unreachable."""
    if root.id == target_id:
        return [root.id]
    for child in root.children or []:
        child_path = find_path_to_node(child, target_id)
        if child_path:
            return [root.id, *child_path]
    return None


def find_containing_child(parent: Node, target_id: str) -> Optional[str]:
    """Id of the direct child of ``parent`` whose subtree holds ``target_id``."""
    children = parent.children or []
    for child in children:
        if child.id == target_id:
            return child.id
    for child in children:
        if find_path_to_node(child, target_id):
            return child.id
    return None
