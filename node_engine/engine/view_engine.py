"""ViewEngine: recursive node tree renderer."""
from __future__ import annotations

import logging
from collections import OrderedDict
from contextvars import ContextVar
from typing import Any, Callable, List, Optional, Tuple

from node_engine.domain.errors import RenderContextError
from node_engine.domain.node import Node
from node_engine.engine.actions import use_engine_actions
from node_engine.engine.context import RenderContext, get_render_context, render_scope, use_node, use_siblings
from node_engine.engine.elements import Element, RenderedNode, RenderedTree
from node_engine.engine.navigation import use_shell_navigation
from node_engine.engine.registry import VariantRegistry
from node_engine.engine.shell_action import current_shell_action_slot

logger = logging.getLogger(__name__)

_active_engine: ContextVar[Optional["ViewEngine"]] = ContextVar("active_view_engine", default=None)

_CacheKey = Tuple[Any, ...]
_NOT_PUBLISHED = object()


class ViewEngine:
    """Walks a node tree, resolves each node's renderer and runs it inside
    a scoped render context.

    The engine renders the root only; every other node is rendered because
    its parent's renderer asked for its children (``use_render_children``),
    so a renderer fully controls where, or whether, children appear.
    """

    def __init__(self, registry: VariantRegistry, memoize: bool = False, cache_size: int = 512) -> None:
        self._registry = registry
        self._memoize = memoize
        self._cache_size = max(cache_size, 1)
        # id(node) -> (node, key, output, published action); least recently used first.
        # The node is held so its id cannot be reused while cached.
        self._cache: "OrderedDict[int, Tuple[Node, _CacheKey, RenderedNode, Any]]" = OrderedDict()
        self._cache_version = registry.version

    @property
    def registry(self) -> VariantRegistry:
        return self._registry

    def render(self, root: Node) -> RenderedTree:
        """Render a whole tree; ``root`` is depth 0 and the root of the pass."""
        rendered = self.render_node(root, depth=0, root_id=root.id, parent_id=None, root_node=root)
        return RenderedTree(root_id=root.id, root=rendered)

    def render_node(
        self,
        node: Node,
        depth: int,
        root_id: str,
        parent_id: Optional[str] = None,
        root_node: Optional[Node] = None,
    ) -> RenderedNode:
        root_node = root_node if root_node is not None else node
        key = (depth, parent_id, root_id, id(root_node)) + _ambient_key()

        cached = self._cached(node, key)
        if cached is not None:
            return cached

        resolution = self._registry.resolve_with_source(node)
        context = RenderContext(
            node=node, depth=depth, parent_id=parent_id, root_id=root_id, root_node=root_node
        )

        slot = current_shell_action_slot()
        published_before = slot.publish_count if slot is not None else 0

        token = _active_engine.set(self)
        try:
            with render_scope(context):
                output = resolution.renderer(node)
        finally:
            _active_engine.reset(token)

        rendered = RenderedNode(
            node=node,
            variant=node.variant,
            resolved_variant=resolution.variant,
            resolution=resolution.source.value,
            depth=depth,
            parent_id=parent_id,
            root_id=root_id,
            element=_as_element(output, node),
        )
        if self._memoize:
            published: Any = _NOT_PUBLISHED
            if slot is not None and slot.publish_count != published_before:
                published = slot.action
            self._store(node, key, rendered, published)
        return rendered

    def render_children(
        self, node: Node, depth: int, root_id: str, root_node: Optional[Node] = None
    ) -> List[RenderedNode]:
        """Render ``node``'s children one level deeper, in array order."""
        return [
            self.render_node(child, depth + 1, root_id, parent_id=node.id, root_node=root_node)
            for child in node.children or []
        ]

    def clear_cache(self) -> None:
        self._cache.clear()

    def _cached(self, node: Node, key: _CacheKey) -> Optional[RenderedNode]:
        if not self._memoize:
            return None
        if self._cache_version != self._registry.version:
            self._cache.clear()
            self._cache_version = self._registry.version
            return None
        entry = self._cache.get(id(node))
        # Identity only: a structurally equal but distinct node is never a hit
        if entry is None or entry[0] is not node or entry[1] != key:
            return None
        self._cache.move_to_end(id(node))
        _, _, rendered, published = entry
        if published is not _NOT_PUBLISHED:
            # Replay the header action the subtree published when it was rendered
            slot = current_shell_action_slot()
            if slot is not None:
                slot.set(published)
        return rendered

    def _store(self, node: Node, key: _CacheKey, rendered: RenderedNode, published: Any) -> None:
        self._cache[id(node)] = (node, key, rendered, published)
        self._cache.move_to_end(id(node))
        while len(self._cache) > self._cache_size:
            self._cache.popitem(last=False)

    @property
    def cached_count(self) -> int:
        return len(self._cache)


def _ambient_key() -> Tuple[Any, ...]:
    """Identity of the scoped state renderers read besides their node."""
    navigation = use_shell_navigation()
    siblings = use_siblings()
    return (
        id(use_engine_actions()),
        id(navigation),
        navigation.revision if navigation is not None else None,
        tuple(id(sibling) for sibling in siblings) if siblings is not None else None,
        current_shell_action_slot() is not None,
    )


def _as_element(output: Any, node: Node) -> Element:
    if isinstance(output, Element):
        return output
    if output is None:
        return Element("empty", {"node_id": node.id})
    if isinstance(output, RenderedNode):
        return Element("fragment", children=[output])
    if isinstance(output, (list, tuple)):
        return Element("fragment", children=list(output))
    return Element("text", children=[str(output)])


def current_engine() -> Optional[ViewEngine]:
    return _active_engine.get()


def render_children(
    node: Node, depth: int, root_id: str, root_node: Optional[Node] = None
) -> List[RenderedNode]:
    """Render ``node``'s children with the engine running the current pass."""
    engine = _active_engine.get()
    if engine is None:
        raise RenderContextError("render_children must be called while the ViewEngine is rendering")
    if root_node is None:
        context = get_render_context()
        root_node = context.root_node if context is not None else node
    return engine.render_children(node, depth, root_id, root_node)


def use_render_children() -> Callable[[], List[RenderedNode]]:
    """Return a callable rendering the current node's children at the right depth."""
    context = use_node()
    engine = _active_engine.get()
    if engine is None:
        raise RenderContextError("use_render_children must be called while the ViewEngine is rendering")

    def _render() -> List[RenderedNode]:
        return engine.render_children(context.node, context.depth, context.root_id, context.root_node)

    return _render
