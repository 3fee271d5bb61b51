"""Render context: ambient per-node state available to renderers.

Each renderer call runs inside a scope holding the node being rendered, its
depth, its parent id and the root of the current pass. Renderers read this
state instead of receiving it as parameters, so any renderer can hand
"render my children" to a shared helper without re-deriving its position.
"""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Generator, List, Optional, Sequence, Tuple

from node_engine.domain.errors import RenderContextError
from node_engine.domain.node import Node, find_node_by_id


@dataclass(frozen=True)
class RenderContext:
    node: Node
    depth: int
    parent_id: Optional[str]
    root_id: str
    root_node: Node


_render_context: ContextVar[Optional[RenderContext]] = ContextVar("render_context", default=None)
_siblings: ContextVar[Optional[Tuple[Node, ...]]] = ContextVar("render_siblings", default=None)


def get_render_context() -> Optional[RenderContext]:
    return _render_context.get()


@contextmanager
def render_scope(context: RenderContext) -> Generator[RenderContext, None, None]:
    """Make ``context`` current for one node's renderer and its descendants."""
    token = _render_context.set(context)
    try:
        yield context
    finally:
        _render_context.reset(token)


def use_node() -> RenderContext:
    """Current render context.

    Raises:
        RenderContextError: if called outside a render pass.
    """
    context = _render_context.get()
    if context is None:
        raise RenderContextError(
            "use_node must be called while a node is being rendered by the ViewEngine"
        )
    return context


def use_node_meta(key: str, default: Any = None) -> Any:
    return use_node().node.metadata.get(key, default)


def use_is_root() -> bool:
    return use_node().depth == 0


def use_has_children() -> bool:
    return use_node().node.has_children


def use_child_count() -> int:
    return len(use_node().node.children or [])


def use_parent_node() -> Optional[Node]:
    """Parent of the current node, looked up in the root of the pass."""
    context = use_node()
    return find_node_by_id(context.root_node, context.parent_id)


# Siblings shared by a view with the cards it places (e.g. lightbox paging)

@contextmanager
def provide_siblings(siblings: Sequence[Node]) -> Generator[Tuple[Node, ...], None, None]:
    token = _siblings.set(tuple(siblings))
    try:
        yield tuple(siblings)
    finally:
        _siblings.reset(token)


def use_siblings() -> Optional[List[Node]]:
    siblings = _siblings.get()
    return list(siblings) if siblings is not None else None


def use_siblings_with_fallback(current: Node) -> Tuple[List[Node], int]:
    """Siblings and the index of ``current`` among them; just ``[current]`` outside a view."""
    siblings = use_siblings()
    if siblings is None:
        return [current], 0
    index = next((i for i, sibling in enumerate(siblings) if sibling.id == current.id), -1)
    return siblings, index
