"""Tests for the recursive ViewEngine and the render context."""
from __future__ import annotations

import pytest
from unittest.mock import Mock

from node_engine.domain.errors import RenderContextError
from node_engine.engine.actions import EngineActions, create_engine_actions, provide_engine_actions
from node_engine.engine.behavior import BehaviorDispatcher
from node_engine.engine.context import (
    provide_siblings,
    use_node,
    use_parent_node,
    use_siblings_with_fallback,
)
from node_engine.engine.elements import Element
from node_engine.engine.navigation import ShellNavigation, provide_shell_navigation
from node_engine.engine.registry import VariantRegistry
from node_engine.engine.renderers import debug_node
from node_engine.engine.shell_action import provide_shell_action
from node_engine.engine.view_engine import ViewEngine, render_children, use_render_children

from conftest import FOLDER_ID, G1_ID, ROOT_ID, TAB_A_ID


def recursive(node):
    """Renderer that records its context and renders every child."""
    context = use_node()
    return Element(
        "box",
        {"depth": context.depth, "parent_id": context.parent_id, "root_id": context.root_id},
        list(use_render_children()()),
    )


def leaf_only(node):
    return Element("leaf", {"node_id": node.id})


@pytest.fixture
def plain_registry():
    registry = VariantRegistry(default_variants={"container": "box"})
    registry.register("box", recursive)
    registry.register("leaf", leaf_only)
    registry.set_fallback(debug_node)
    return registry


@pytest.fixture
def nested_tree(make_node):
    grandchild = make_node("gc", "box")
    child = make_node("c1", "box", children=[grandchild])
    return make_node("root", "box", "container", children=[child, make_node("c2", "box")])


class TestViewEngineRendering:
    """Test depth, parent and root bookkeeping."""

    def test_positional_context(self, plain_registry, nested_tree):
        """Test that each node sees its own depth, parent id and the root id."""
        tree = ViewEngine(plain_registry).render(nested_tree)
        positions = {
            rendered.node_id: (rendered.depth, rendered.parent_id, rendered.root_id)
            for rendered in tree.iter_rendered()
        }

        assert positions == {
            "root": (0, None, "root"),
            "c1": (1, "root", "root"),
            "gc": (2, "c1", "root"),
            "c2": (1, "root", "root"),
        }
        assert tree.node_count == 4

    def test_renderer_sees_same_values_as_output(self, plain_registry, nested_tree):
        tree = ViewEngine(plain_registry).render(nested_tree)
        gc = tree.find("gc")

        assert gc.element.props == {"depth": 2, "parent_id": "c1", "root_id": "root"}

    def test_children_rendered_in_order(self, plain_registry, nested_tree):
        tree = ViewEngine(plain_registry).render(nested_tree)
        assert [child.node_id for child in tree.root.element.children] == ["c1", "c2"]

    def test_renderer_controls_children(self, plain_registry, make_node):
        """Test that children are not rendered unless the parent asks for them."""
        root = make_node("root", "leaf", children=[make_node("c1", "box")])
        tree = ViewEngine(plain_registry).render(root)

        assert tree.node_count == 1
        assert tree.find("c1") is None

    def test_unknown_variant_degrades_without_breaking_siblings(self, plain_registry, make_node):
        """Test that one unknown variant never stops the rest of the tree."""
        root = make_node(
            "root", "box", "container",
            children=[make_node("bad", "mystery"), make_node("good", "leaf")],
        )
        tree = ViewEngine(plain_registry).render(root)

        bad = tree.find("bad")
        assert bad.resolution == "fallback"
        assert bad.resolved_variant == "debug_node"
        assert bad.variant == "mystery"
        assert tree.find("good").resolution == "exact"

    def test_type_default_resolution_recorded(self, plain_registry, make_node):
        root = make_node("root", "box", children=[make_node("folder", "mystery", "container")])
        rendered = ViewEngine(plain_registry).render(root).find("folder")

        assert rendered.resolution == "type_default"
        assert rendered.resolved_variant == "box"

    def test_fallback_keeps_rendering_children(self, plain_registry, make_node):
        """Test that the debug fallback still renders the subtree below it."""
        root = make_node("root", "mystery", children=[make_node("c1", "box")])
        tree = ViewEngine(plain_registry).render(root)

        assert tree.root.resolution == "fallback"
        assert tree.find("c1").depth == 1
        assert tree.find("c1").parent_id == "root"

    def test_non_element_output_is_wrapped(self, make_node):
        registry = VariantRegistry()
        registry.register("none", lambda node: None)
        registry.register("text", lambda node: node.title)
        registry.set_fallback(debug_node)
        engine = ViewEngine(registry)

        assert engine.render(make_node("a", "none")).root.element.tag == "empty"
        text = engine.render(make_node("b", "text", title="Hello")).root.element
        assert text.tag == "text"
        assert text.text() == "Hello"

    def test_serialization(self, plain_registry, nested_tree):
        data = ViewEngine(plain_registry).render(nested_tree).to_dict()

        assert data["root_id"] == "root"
        assert data["node_count"] == 4
        assert data["root"]["element"]["children"][0]["node_id"] == "c1"


class TestMemoization:
    """Test identity-keyed render caching."""

    def test_same_node_object_reuses_output(self, plain_registry, nested_tree):
        engine = ViewEngine(plain_registry, memoize=True)
        first = engine.render(nested_tree)
        second = engine.render(nested_tree)

        assert second.root is first.root

    def test_equal_but_distinct_node_is_rerendered(self, plain_registry, nested_tree):
        """Test that structural equality is not enough for a cache hit."""
        engine = ViewEngine(plain_registry, memoize=True)
        first = engine.render(nested_tree)
        copy = nested_tree.model_copy(deep=True)

        assert copy == nested_tree
        assert engine.render(copy).root is not first.root

    def test_registry_change_invalidates_cache(self, plain_registry, nested_tree):
        engine = ViewEngine(plain_registry, memoize=True)
        first = engine.render(nested_tree)
        plain_registry.register("leaf", leaf_only)

        assert engine.render(nested_tree).root is not first.root

    def test_navigation_change_rerenders_shell(self, registry, shell_tree):
        """Test that a cached shell is not reused once its navigation state moves."""
        engine = ViewEngine(registry, memoize=True)
        navigation = ShellNavigation(shell_tree)

        with provide_shell_navigation(navigation):
            first = engine.render(shell_tree)
            navigation.navigate_to_node(FOLDER_ID)
            second = engine.render(shell_tree)

        assert first.root.element.props["target_node_id"] is None
        assert second.root.element.props["target_node_id"] == FOLDER_ID
        assert second.find(FOLDER_ID).depth == 2

    def test_action_bundle_change_rerenders(self, registry, shell_tree):
        engine = ViewEngine(registry, memoize=True)

        with provide_engine_actions(EngineActions.no_op(ROOT_ID)):
            inert = engine.render(shell_tree)
        with provide_engine_actions(create_engine_actions(ROOT_ID, BehaviorDispatcher(Mock()))):
            live = engine.render(shell_tree)

        assert inert.find(G1_ID).element.props["interactive"] is False
        assert live.find(G1_ID).element.props["interactive"] is True

    def test_cache_hit_replays_header_action(self, registry, make_node):
        """Test that a cached view still publishes its header action to the shell."""
        engine = ViewEngine(registry, memoize=True)
        tab = make_node(
            TAB_A_ID, "view_directory", "collection",
            header_action={"label": "New", "options": [{"id": "t", "label": "Task", "action_type": "create"}]},
        )

        with provide_shell_action() as first_slot:
            first = engine.render(tab)
        with provide_shell_action() as second_slot:
            second = engine.render(tab)

        assert second.root is first.root
        assert first_slot.action.label == "New"
        assert second_slot.action is first_slot.action

    def test_cache_is_bounded(self, plain_registry, nested_tree):
        engine = ViewEngine(plain_registry, memoize=True, cache_size=2)
        engine.render(nested_tree)

        assert engine.cached_count == 2

    def test_memoization_off_by_default(self, plain_registry, nested_tree):
        engine = ViewEngine(plain_registry)
        assert engine.render(nested_tree).root is not engine.render(nested_tree).root


class TestRenderContext:
    """Test context accessors."""

    def test_use_node_outside_render(self):
        """Test that context accessors fail loudly outside a render pass."""
        with pytest.raises(RenderContextError):
            use_node()

    def test_render_children_outside_render(self, make_node):
        with pytest.raises(RenderContextError):
            render_children(make_node("a"), 0, "a")

    def test_use_parent_node(self, make_node):
        seen = {}

        def remember_parent(node):
            parent = use_parent_node()
            seen[node.id] = parent.id if parent else None
            return Element("row", {}, list(use_render_children()()))

        registry = VariantRegistry()
        registry.register("row", remember_parent)
        registry.set_fallback(debug_node)
        root = make_node("root", "row", children=[make_node("c1", "row")])
        ViewEngine(registry).render(root)

        assert seen == {"root": None, "c1": "root"}

    def test_siblings_with_fallback(self, make_node):
        """Test sibling lookup inside and outside a provided scope."""
        a, b = make_node("a"), make_node("b")

        assert use_siblings_with_fallback(b) == ([b], 0)
        with provide_siblings([a, b]):
            assert use_siblings_with_fallback(b) == ([a, b], 1)
