"""Adapter turning flat persisted resources into a Node tree."""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from node_engine.domain.entities import ResourceEntity
from node_engine.domain.node import RESOURCE_TYPE_TO_NODE_TYPE, Node, NodeType

logger = logging.getLogger(__name__)

# Resource type -> variant used when the resource does not name one
DEFAULT_RESOURCE_VARIANTS: Dict[str, str] = {
    "folder": "row_neon_group",
    "project": "view_list_stack",
    "task": "row_detail_check",
    "recipe": "card_media_top",
    "document": "row_simple",
    "event": "row_detail_check",
}
FALLBACK_RESOURCE_VARIANT = "row_simple"

EMPTY_ROOT_PLACEHOLDER = "No items yet. Tap + to create one."


def default_variant_for(resource_type: str) -> str:
    return DEFAULT_RESOURCE_VARIANTS.get(resource_type, FALLBACK_RESOURCE_VARIANT)


def resource_to_node(resource: ResourceEntity, children: Optional[List[Node]] = None) -> Node:
    """Map one resource row to a node; ``meta_data`` becomes the metadata bag."""
    metadata = dict(resource.get("meta_data") or {})
    resource_type = resource.get("type") or ""
    variant = metadata.get("variant")
    if not isinstance(variant, str) or not variant:
        variant = default_variant_for(resource_type)

    if not metadata.get("status") and resource.get("status"):
        metadata["status"] = resource["status"]
    if not metadata.get("description") and resource.get("description"):
        metadata["description"] = resource["description"]

    return Node(
        id=resource["id"],
        type=RESOURCE_TYPE_TO_NODE_TYPE.get(resource_type, NodeType.ITEM),
        variant=variant,
        title=resource.get("title") or "Untitled",
        metadata=metadata,
        children=children if children is not None else [],
        pointer_table=resource.get("pointer_table"),
        pointer_id=resource.get("pointer_id"),
        duration_minutes=resource.get("duration_minutes"),
    )


def resources_to_node_tree(resources: Sequence[ResourceEntity], root_id: str) -> Optional[Node]:
    """Build the tree rooted at ``root_id`` from resources linked by ``parent_id``.

    Resources whose parent is not in the list are dropped from the tree.
    Children are sorted by title. Returns None when the root is missing.
    """
    if not resources:
        return None

    by_id: Dict[str, ResourceEntity] = {resource["id"]: resource for resource in resources}
    if root_id not in by_id:
        logger.warning(f"Root node not found: {root_id}")
        return None

    children_of: Dict[str, List[str]] = defaultdict(list)
    for resource in resources:
        parent_id = resource.get("parent_id")
        if parent_id and parent_id in by_id and parent_id != resource["id"]:
            children_of[parent_id].append(resource["id"])

    # Post-order build: nodes are immutable, so children must exist before their parent
    built: Dict[str, Node] = {}
    visited = set()
    stack: List[Tuple[str, bool]] = [(root_id, False)]
    while stack:
        resource_id, expanded = stack.pop()
        if expanded:
            children = [built[child_id] for child_id in children_of[resource_id] if child_id in built]
            children.sort(key=lambda child: child.title.casefold())
            built[resource_id] = resource_to_node(by_id[resource_id], children)
            continue
        if resource_id in visited:
            logger.warning(f"Skipping resource {resource_id}: parent_id chain loops back to it")
            continue
        visited.add(resource_id)
        stack.append((resource_id, True))
        for child_id in children_of[resource_id]:
            stack.append((child_id, False))

    return built[root_id]


def create_empty_root_node(node_id: str, title: str, variant: str = "view_directory") -> Node:
    """Root for an app with no content yet."""
    return Node(
        id=node_id,
        type=NodeType.CONTAINER,
        variant=variant,
        title=title,
        metadata={"placeholder": EMPTY_ROOT_PLACEHOLDER},
        children=[],
    )
