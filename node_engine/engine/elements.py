"""Render output: a light virtual tree built by renderers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from node_engine.domain.node import Node


@dataclass
class Element:
    """A renderer's output. ``handlers`` hold interaction callbacks
    (click, long press, commit) and are never serialized."""
    tag: str
    props: Dict[str, Any] = field(default_factory=dict)
    children: List[Child] = field(default_factory=list)
    handlers: Dict[str, Callable[..., Any]] = field(default_factory=dict, repr=False, compare=False)

    def iter_rendered(self) -> Iterator[RenderedNode]:
        """Rendered nodes placed anywhere inside this element, depth-first."""
        for child in self.children:
            if isinstance(child, (Element, RenderedNode)):
                yield from child.iter_rendered()

    def iter_elements(self) -> Iterator[Element]:
        """This element and its nested elements, not crossing into child nodes."""
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter_elements()

    def find(self, tag: str) -> Optional[Element]:
        for element in self.iter_elements():
            if element.tag == tag:
                return element
        return None

    def text(self) -> str:
        parts = []
        for child in self.children:
            if isinstance(child, str):
                parts.append(child)
            elif isinstance(child, Element):
                parts.append(child.text())
        return " ".join(p for p in parts if p)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"tag": self.tag, "props": self.props}
        if self.children:
            data["children"] = [
                child if isinstance(child, str) else child.to_dict() for child in self.children
            ]
        if self.handlers:
            data["handlers"] = sorted(self.handlers)
        return data


@dataclass
class RenderedNode:
    """One node after resolution and rendering, with its positional context."""
    node: Node = field(repr=False)
    variant: str
    resolved_variant: str
    resolution: str
    depth: int
    parent_id: Optional[str]
    root_id: str
    element: Element

    @property
    def node_id(self) -> str:
        return self.node.id

    def iter_rendered(self) -> Iterator[RenderedNode]:
        yield self
        yield from self.element.iter_rendered()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node_id": self.node_id,
            "variant": self.variant,
            "resolved_variant": self.resolved_variant,
            "resolution": self.resolution,
            "depth": self.depth,
            "parent_id": self.parent_id,
            "root_id": self.root_id,
            "element": self.element.to_dict(),
        }


Child = Union[Element, RenderedNode, str]


@dataclass
class RenderedTree:
    root_id: str
    root: RenderedNode

    def iter_rendered(self) -> Iterator[RenderedNode]:
        return self.root.iter_rendered()

    def find(self, node_id: str) -> Optional[RenderedNode]:
        for rendered in self.iter_rendered():
            if rendered.node_id == node_id:
                return rendered
        return None

    @property
    def node_count(self) -> int:
        return sum(1 for _ in self.iter_rendered())

    def to_dict(self) -> Dict[str, Any]:
        return {"root_id": self.root_id, "node_count": self.node_count, "root": self.root.to_dict()}
