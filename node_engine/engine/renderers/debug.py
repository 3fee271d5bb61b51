"""Diagnostic fallback renderer for nodes whose variant cannot be resolved."""
from __future__ import annotations

from node_engine.domain.node import Node
from node_engine.engine.context import use_node
from node_engine.engine.elements import Element
from node_engine.engine.view_engine import use_render_children


def _short(node_id: str) -> str:
    return node_id[:8] + "..." if len(node_id) > 8 else node_id


def debug_node(node: Node) -> Element:
    """Show what is known about the node and keep rendering its children."""
    context = use_node()

    position = f"Depth: {context.depth} | Root: {_short(context.root_id)}"
    if context.parent_id:
        position += f" | Parent: {_short(context.parent_id)}"

    children = [
        Element("header", {"warning": True}, [f'Unknown Variant: "{node.variant}"']),
        Element("title", {"type": node.type.value}, [node.title]),
        Element("id", {}, [f"ID: {node.id}"]),
        Element("position", {"depth": context.depth, "parent_id": context.parent_id}, [position]),
        Element(
            "metadata",
            {"key_count": len(node.metadata), "keys": sorted(node.metadata)},
            [f"Metadata ({len(node.metadata)} keys)"],
        ),
    ]
    if node.relationships:
        children.append(Element("relationships", {"count": len(node.relationships)}))
    if node.has_children:
        children.append(Element("children", {}, list(use_render_children()())))

    return Element(
        "debug_node",
        {
            "node_id": node.id,
            "variant": node.variant,
            "node_type": node.type.value,
            "depth": context.depth,
            "root_id": context.root_id,
            "parent_id": context.parent_id,
        },
        children,
    )
