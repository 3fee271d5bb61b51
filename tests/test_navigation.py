"""Tests for shell navigation over tabs and deep targets."""
from __future__ import annotations

from unittest.mock import Mock

from node_engine.domain.events import DomainEventPublisher, NavigationChanged
from node_engine.engine.back_button import BackButtonDispatcher
from node_engine.engine.navigation import ShellNavigation

from conftest import FOLDER_ID, G1_ID, G2_ID, ITEM_B_ID, ROOT_ID, TAB_A_ID, TAB_B_ID, build_node


class TestInitialState:
    """Test the state before any navigation."""

    def test_defaults_to_first_tab(self, shell_tree):
        navigation = ShellNavigation(shell_tree)

        assert navigation.target_node_id is None
        assert navigation.target_path == [ROOT_ID]
        assert navigation.active_tab_id == TAB_A_ID
        assert navigation.is_at_tab_root is True
        assert navigation.is_deep_view is False
        assert navigation.show_back_button is False
        assert navigation.display_title == "Tab A"
        assert navigation.viewport_node.id == TAB_A_ID

    def test_configured_default_tab(self, shell_tree):
        """Test that metadata.default_tab_id overrides the first child."""
        root = shell_tree.model_copy(update={"metadata": {"default_tab_id": TAB_B_ID}})
        assert ShellNavigation(root).active_tab_id == TAB_B_ID

    def test_breadcrumbs_at_root(self, shell_tree):
        crumbs = ShellNavigation(shell_tree).breadcrumbs

        assert [(c.id, c.path_index, c.is_root) for c in crumbs] == [
            (ROOT_ID, 0, True),
            (TAB_A_ID, 1, False),
        ]


class TestDeepNavigation:
    """Test navigating to nodes below the tab level."""

    def test_deep_target_maps_to_tab(self, shell_tree):
        """Test that a grandchild selects its containing tab and a deep view."""
        navigation = ShellNavigation(shell_tree)

        assert navigation.navigate_to_node(G1_ID) is True
        assert navigation.target_path == [ROOT_ID, TAB_A_ID, G1_ID]
        assert navigation.active_tab_id == TAB_A_ID
        assert navigation.is_deep_view is True
        assert navigation.show_back_button is True
        assert navigation.display_title == "Grandchild One"

    def test_viewport_shows_deep_item_with_own_variant(self, shell_tree):
        navigation = ShellNavigation(shell_tree)
        navigation.navigate_to_node(G2_ID)

        assert navigation.viewport_node.id == G2_ID
        assert navigation.viewport_node.variant == "row_detail_check"

    def test_deep_container_shown_as_directory(self, shell_tree):
        """Test that a deep container lays out its children as a directory."""
        navigation = ShellNavigation(shell_tree)
        navigation.navigate_to_node(FOLDER_ID)

        assert navigation.viewport_node.id == FOLDER_ID
        assert navigation.viewport_node.variant == "view_directory"

    def test_breadcrumbs_follow_path(self, shell_tree):
        navigation = ShellNavigation(shell_tree)
        navigation.navigate_to_node(G2_ID)

        assert [c.title for c in navigation.breadcrumbs] == ["My Home", "Tab A", "Folder", "Grandchild Two"]
        assert [c.path_index for c in navigation.breadcrumbs] == [0, 1, 2, 3]

    def test_unreachable_target_ignored(self, shell_tree):
        navigation = ShellNavigation(shell_tree)
        navigation.navigate_to_node(G1_ID)

        assert navigation.navigate_to_node("missing") is False
        assert navigation.target_node_id == G1_ID

    def test_state_derived_only_from_target(self, shell_tree):
        """Test that the same target gives the same state regardless of history."""
        direct = ShellNavigation(shell_tree)
        direct.navigate_to_node(G2_ID)

        wandering = ShellNavigation(shell_tree)
        wandering.select_tab(TAB_B_ID)
        wandering.navigate_to_node(ITEM_B_ID)
        wandering.navigate_to_node(G2_ID)

        assert wandering.target_path == direct.target_path
        assert wandering.active_tab_id == direct.active_tab_id


class TestTransitions:
    """Test back, level and tab transitions."""

    def test_navigate_back(self, shell_tree):
        navigation = ShellNavigation(shell_tree)
        navigation.navigate_to_node(G2_ID)

        assert navigation.navigate_back() is True
        assert navigation.target_node_id == FOLDER_ID
        navigation.navigate_back()
        navigation.navigate_back()
        assert navigation.target_path == [ROOT_ID]
        assert navigation.navigate_back() is False

    def test_navigate_to_level(self, shell_tree):
        navigation = ShellNavigation(shell_tree)
        navigation.navigate_to_node(G2_ID)

        assert navigation.navigate_to_level(1) is True
        assert navigation.target_node_id == TAB_A_ID
        assert navigation.is_at_tab_root is True
        assert navigation.navigate_to_level(5) is False
        assert navigation.navigate_to_level(-1) is False

    def test_select_tab(self, shell_tree):
        navigation = ShellNavigation(shell_tree)

        assert navigation.select_tab(TAB_B_ID) is True
        assert navigation.active_tab_id == TAB_B_ID
        assert navigation.display_title == "Tab B"
        assert navigation.select_tab(G1_ID) is False
        assert navigation.active_tab_id == TAB_B_ID

    def test_reset(self, shell_tree):
        navigation = ShellNavigation(shell_tree)
        navigation.navigate_to_node(G2_ID)
        navigation.reset()

        assert navigation.target_node_id is None
        assert navigation.active_tab_id == TAB_A_ID

    def test_replace_tree_with_target_removed(self, shell_tree):
        """Test that a vanished target degrades to the root without raising."""
        navigation = ShellNavigation(shell_tree)
        navigation.navigate_to_node(G2_ID)

        navigation.replace_tree(build_node(ROOT_ID, "layout_app_shell", "space", title="My Home"))

        assert navigation.target_path == [ROOT_ID]
        assert navigation.is_deep_view is False


class TestBackHandling:
    """Test the shell's back-button behavior."""

    def test_back_in_deep_view_pops(self, shell_tree):
        navigation = ShellNavigation(shell_tree)
        navigation.navigate_to_node(G1_ID)

        assert navigation.handle_back() is True
        assert navigation.target_node_id == TAB_A_ID

    def test_back_on_other_tab_returns_to_default(self, shell_tree):
        navigation = ShellNavigation(shell_tree)
        navigation.select_tab(TAB_B_ID)

        assert navigation.handle_back() is True
        assert navigation.active_tab_id == TAB_A_ID

    def test_back_on_default_tab_not_consumed(self, shell_tree):
        assert ShellNavigation(shell_tree).handle_back() is False

    def test_bind_back_button(self, shell_tree):
        dispatcher = BackButtonDispatcher()
        navigation = ShellNavigation(shell_tree)
        navigation.navigate_to_node(G2_ID)

        navigation.bind_back_button(dispatcher)

        assert dispatcher.handler_ids() == [f"shell:{ROOT_ID}"]
        assert dispatcher.dispatch() is True
        assert navigation.target_node_id == FOLDER_ID


class TestNavigationListeners:
    """Test change notifications."""

    def test_listener_and_unsubscribe(self, shell_tree):
        navigation = ShellNavigation(shell_tree)
        listener = Mock()
        unsubscribe = navigation.subscribe(listener)

        navigation.navigate_to_node(G1_ID)
        listener.assert_called_once_with(G1_ID, [ROOT_ID, TAB_A_ID, G1_ID])

        unsubscribe()
        navigation.navigate_back()
        assert listener.call_count == 1

    def test_publishes_navigation_changed(self, shell_tree):
        publisher = DomainEventPublisher()
        handler = Mock()
        publisher.subscribe(NavigationChanged, handler)

        ShellNavigation(shell_tree, publisher=publisher).navigate_to_node(FOLDER_ID)

        event = handler.call_args[0][0]
        assert event.aggregate_id == ROOT_ID
        assert event.target_node_id == FOLDER_ID
        assert event.target_path == [ROOT_ID, TAB_A_ID, FOLDER_ID]
