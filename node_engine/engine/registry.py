"""Variant registry: maps variant strings to renderers.

Resolution is self-healing. An unknown variant falls back to the default
variant of the node's type, then to the diagnostic fallback renderer, so one
bad node never breaks the rest of the tree. Only a registry without a
fallback is an error, and that is a startup configuration error.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional

from node_engine.domain.errors import ConfigurationError, ValidationError
from node_engine.domain.events import (
    DomainEventPublisher,
    VariantOverwritten,
    VariantResolutionDegraded,
)
from node_engine.domain.node import Node, NodeType
from node_engine.engine.elements import Element

logger = logging.getLogger(__name__)

Renderer = Callable[[Node], Element]


class ResolutionSource(str, Enum):
    EXACT = "exact"
    TYPE_DEFAULT = "type_default"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Resolution:
    renderer: Renderer
    variant: str
    source: ResolutionSource

    @property
    def degraded(self) -> bool:
        return self.source is not ResolutionSource.EXACT


def _type_key(node_type: NodeType | str) -> str:
    return node_type.value if isinstance(node_type, NodeType) else str(node_type)


class VariantRegistry:
    """Lookup table from variant name to renderer with fallback resolution."""

    def __init__(
        self,
        default_variants: Optional[Mapping[str, str]] = None,
        publisher: Optional[DomainEventPublisher] = None,
    ) -> None:
        self._variants: Dict[str, Renderer] = {}
        self._defaults: Dict[str, str] = {
            _type_key(node_type): variant for node_type, variant in (default_variants or {}).items()
        }
        self._fallback: Optional[Renderer] = None
        self._fallback_name = "debug_node"
        self._publisher = publisher
        # Bumped on every change so render caches can tell they are stale
        self.version = 0

    # --------------- Registration ---------------
    def register(self, variant: str, renderer: Renderer) -> None:
        """Register a renderer; re-registering overwrites (hot swap) with a warning."""
        if not variant:
            raise ValidationError("Variant name cannot be empty")
        if variant in self._variants:
            logger.warning(f"[Registry] Overwriting existing variant \"{variant}\"")
            self._publish(VariantOverwritten(event_id="", timestamp=None, aggregate_id=variant, variant=variant))
        self._variants[variant] = renderer
        self.version += 1

    def register_many(self, variants: Mapping[str, Renderer]) -> None:
        for variant, renderer in variants.items():
            self.register(variant, renderer)

    def unregister(self, variant: str) -> bool:
        removed = self._variants.pop(variant, None) is not None
        if removed:
            self.version += 1
        return removed

    def clear(self) -> None:
        self._variants.clear()
        self.version += 1

    def set_fallback(self, renderer: Renderer, name: str = "debug_node") -> None:
        self._fallback = renderer
        self._fallback_name = name
        self.version += 1

    def set_default_for_type(self, node_type: NodeType | str, variant: str) -> None:
        self._defaults[_type_key(node_type)] = variant
        self.version += 1

    # --------------- Introspection ---------------
    def has_variant(self, variant: str) -> bool:
        return variant in self._variants

    def registered_variants(self) -> List[str]:
        return list(self._variants)

    def get_default_variant(self, node_type: NodeType | str) -> Optional[str]:
        return self._defaults.get(_type_key(node_type))

    def type_defaults(self) -> Dict[str, str]:
        return dict(self._defaults)

    @property
    def has_fallback(self) -> bool:
        return self._fallback is not None

    @property
    def fallback_name(self) -> Optional[str]:
        return self._fallback_name if self._fallback is not None else None

    def assert_configured(self) -> None:
        """Fail fast at startup when no fallback renderer is set."""
        if self._fallback is None:
            raise ConfigurationError(
                "Variant registry has no fallback renderer. "
                "Call set_fallback(...) during engine initialization."
            )

    # --------------- Resolution ---------------
    def resolve(self, node: Node) -> Renderer:
        return self.resolve_with_source(node).renderer

    def resolve_with_source(self, node: Node) -> Resolution:
        """Exact variant, then type default, then diagnostic fallback."""
        exact = self._variants.get(node.variant)
        if exact is not None:
            return Resolution(exact, node.variant, ResolutionSource.EXACT)

        node_type = _type_key(node.type)
        default_variant = self._defaults.get(node_type)
        if default_variant:
            default_renderer = self._variants.get(default_variant)
            if default_renderer is not None:
                logger.warning(
                    f"[Registry] Unknown variant \"{node.variant}\" for node \"{node.id}\". "
                    f"Falling back to default \"{default_variant}\" for type \"{node_type}\"."
                )
                resolution = Resolution(default_renderer, default_variant, ResolutionSource.TYPE_DEFAULT)
                self._publish_degraded(node, resolution)
                return resolution

        if self._fallback is not None:
            logger.warning(
                f"[Registry] No renderer for variant \"{node.variant}\" or type \"{node_type}\". "
                f"Using {self._fallback_name} fallback for node \"{node.id}\"."
            )
            resolution = Resolution(self._fallback, self._fallback_name, ResolutionSource.FALLBACK)
            self._publish_degraded(node, resolution)
            return resolution

        raise ConfigurationError(
            f"Cannot render node \"{node.id}\": no renderer for variant \"{node.variant}\", "
            f"no default for type \"{node_type}\", and no fallback renderer set."
        )

    def _publish_degraded(self, node: Node, resolution: Resolution) -> None:
        self._publish(
            VariantResolutionDegraded(
                event_id="",
                timestamp=None,
                aggregate_id=node.id,
                variant=node.variant,
                node_type=_type_key(node.type),
                resolved_variant=resolution.variant,
                source=resolution.source.value,
            )
        )

    def _publish(self, event) -> None:
        if self._publisher is not None:
            self._publisher.publish(event)
