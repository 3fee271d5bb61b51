"""Tests for variant registration and resolution."""
from __future__ import annotations

import logging

import pytest
from unittest.mock import Mock

from node_engine.domain.errors import ConfigurationError, ValidationError
from node_engine.domain.events import DomainEventPublisher, VariantOverwritten, VariantResolutionDegraded
from node_engine.domain.node import NodeType
from node_engine.engine.elements import Element
from node_engine.engine.registry import ResolutionSource, VariantRegistry
from node_engine.engine.renderers import BUILTIN_VARIANTS, build_default_registry, debug_node


def _renderer(tag):
    return lambda node: Element(tag, {"node_id": node.id})


class TestVariantResolution:
    """Test the exact -> type default -> fallback chain."""

    def test_exact_variant(self, make_node):
        registry = VariantRegistry()
        renderer = _renderer("row")
        registry.register("row_simple", renderer)

        resolution = registry.resolve_with_source(make_node("n1", "row_simple"))

        assert resolution.renderer is renderer
        assert resolution.source is ResolutionSource.EXACT
        assert resolution.degraded is False

    def test_unknown_variant_uses_type_default(self, make_node):
        """Test that an unknown variant renders with its type's default variant."""
        publisher = DomainEventPublisher()
        handler = Mock()
        publisher.subscribe(VariantResolutionDegraded, handler)

        registry = VariantRegistry(default_variants={NodeType.ITEM: "list_row"}, publisher=publisher)
        registry.register("list_row", _renderer("list_row"))

        resolution = registry.resolve_with_source(make_node("n1", "mystery"))

        assert resolution.variant == "list_row"
        assert resolution.source is ResolutionSource.TYPE_DEFAULT
        event = handler.call_args[0][0]
        assert event.variant == "mystery"
        assert event.resolved_variant == "list_row"
        assert event.source == "type_default"
        assert event.aggregate_id == "n1"

    def test_unknown_variant_uses_fallback(self, make_node):
        """Test that the fallback renders nodes with no usable type default."""
        registry = VariantRegistry(default_variants={"item": "not_registered"})
        registry.set_fallback(debug_node, name="debug_node")

        resolution = registry.resolve_with_source(make_node("n1", "mystery"))

        assert resolution.renderer is debug_node
        assert resolution.variant == "debug_node"
        assert resolution.source is ResolutionSource.FALLBACK

    def test_resolution_without_fallback_is_configuration_error(self, make_node):
        registry = VariantRegistry()
        with pytest.raises(ConfigurationError, match="no fallback renderer"):
            registry.resolve(make_node("n1", "mystery"))

    def test_assert_configured(self):
        """Test that a registry without a fallback fails at startup."""
        registry = VariantRegistry()
        with pytest.raises(ConfigurationError):
            registry.assert_configured()

        registry.set_fallback(debug_node)
        registry.assert_configured()

    def test_every_node_resolves_with_default_registry(self, registry, make_node):
        """Test that the default registry is total over all node types."""
        for node_type in NodeType:
            node = make_node("n1", "never_registered", node_type.value)
            assert registry.resolve(node) is not None


class TestVariantRegistration:
    """Test registration, overwrite and introspection."""

    def test_overwrite_warns_and_publishes(self, caplog, make_node):
        """Test that re-registering a variant hot-swaps it with a warning."""
        publisher = DomainEventPublisher()
        handler = Mock()
        publisher.subscribe(VariantOverwritten, handler)
        registry = VariantRegistry(publisher=publisher)
        registry.register("row", _renderer("old"))
        replacement = _renderer("new")

        with caplog.at_level(logging.WARNING, logger="node_engine.engine.registry"):
            registry.register("row", replacement)

        assert 'Overwriting existing variant "row"' in caplog.text
        assert handler.call_args[0][0].variant == "row"
        assert registry.resolve(make_node("n1", "row")) is replacement

    def test_empty_variant_name_rejected(self):
        with pytest.raises(ValidationError):
            VariantRegistry().register("", _renderer("x"))

    def test_version_bumps_on_change(self):
        registry = VariantRegistry()
        start = registry.version
        registry.register("a", _renderer("a"))
        registry.unregister("a")
        registry.set_default_for_type("item", "a")

        assert registry.version == start + 3

    def test_unregister(self):
        registry = VariantRegistry()
        registry.register("a", _renderer("a"))

        assert registry.unregister("a") is True
        assert registry.unregister("a") is False
        assert registry.has_variant("a") is False

    def test_default_registry_contents(self, registry):
        """Test that every built-in variant is registered and debug_node is only the fallback."""
        assert set(registry.registered_variants()) == set(BUILTIN_VARIANTS)
        assert registry.fallback_name == "debug_node"
        assert "debug_node" not in registry.registered_variants()
        assert registry.get_default_variant(NodeType.ITEM) == "list_row"
        assert registry.get_default_variant("container") == "container_stack"

    def test_build_default_registry_uses_publisher(self, make_node):
        publisher = DomainEventPublisher()
        handler = Mock()
        publisher.subscribe(VariantResolutionDegraded, handler)

        build_default_registry(publisher=publisher).resolve(make_node("n1", "mystery"))

        handler.assert_called_once()
