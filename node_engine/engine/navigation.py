"""Shell navigation: maps an arbitrarily deep target node onto tabs and breadcrumbs.

The only state is ``target_node_id``. Path, active tab, breadcrumbs and
titles are recomputed from that id and the current tree snapshot on every
read, so nothing depends on the order of earlier navigations.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Callable, Generator, List, Optional

from node_engine.domain.events import DomainEventPublisher, NavigationChanged
from node_engine.domain.metadata import default_tab_id_of
from node_engine.domain.node import (
    Node,
    NodeType,
    find_containing_child,
    find_node_by_id,
    find_path_to_node,
)
from node_engine.engine.back_button import BackButtonDispatcher, BackHandlerRegistration

logger = logging.getLogger(__name__)

DIRECTORY_VARIANT = "view_directory"

NavigationListener = Callable[[Optional[str], List[str]], None]


@dataclass(frozen=True)
class BreadcrumbItem:
    id: str
    title: str
    path_index: int
    is_root: bool = False


class ShellNavigation:
    """Navigation state machine for a shell node whose children are tabs."""

    def __init__(
        self,
        root: Node,
        target_node_id: Optional[str] = None,
        default_tab_id: Optional[str] = None,
        publisher: Optional[DomainEventPublisher] = None,
    ) -> None:
        self._root = root
        self._target_node_id = target_node_id
        self._default_tab_id = default_tab_id
        self._publisher = publisher
        self._listeners: List[NavigationListener] = []
        self._revision = 0

    # --------------- State ---------------
    @property
    def root(self) -> Node:
        return self._root

    @property
    def revision(self) -> int:
        """Bumped on every state change."""
        return self._revision

    @property
    def target_node_id(self) -> Optional[str]:
        return self._target_node_id

    @property
    def tab_ids(self) -> List[str]:
        return [child.id for child in self._root.children or []]

    @property
    def default_tab_id(self) -> Optional[str]:
        """Configured default tab, else the first child."""
        configured = self._default_tab_id or default_tab_id_of(self._root)
        if configured:
            return configured
        tabs = self.tab_ids
        return tabs[0] if tabs else None

    # --------------- Derived values ---------------
    @property
    def target_path(self) -> List[str]:
        """Ids from root to target; degrades to ``[root]`` when the target is gone."""
        if self._target_node_id is None:
            return [self._root.id]
        return find_path_to_node(self._root, self._target_node_id) or [self._root.id]

    @property
    def active_tab_id(self) -> Optional[str]:
        target = self._target_node_id
        if target is None or target == self._root.id:
            return self.default_tab_id
        if target in self.tab_ids:
            return target
        return find_containing_child(self._root, target) or self.default_tab_id

    @property
    def active_tab(self) -> Optional[Node]:
        active = self.active_tab_id
        return next((tab for tab in self._root.children or [] if tab.id == active), None)

    @property
    def is_at_tab_root(self) -> bool:
        """Navigation depth is at most one (root or a tab)."""
        return len(self.target_path) <= 2

    @property
    def is_deep_view(self) -> bool:
        return not self.is_at_tab_root

    @property
    def can_navigate_back(self) -> bool:
        return len(self.target_path) > 1

    @property
    def show_back_button(self) -> bool:
        return self.is_deep_view and self.can_navigate_back

    @property
    def target_node(self) -> Optional[Node]:
        return find_node_by_id(self._root, self.target_path[-1])

    @property
    def viewport_node(self) -> Optional[Node]:
        """Node shown in the viewport: the deep target, else the active tab.

        A deep container is shown as a directory rather than with its own
        (row/card) variant so that it lays out its children.
        """
        if self.is_deep_view:
            target = self.target_node
            if target is not None:
                if target.type == NodeType.CONTAINER or target.has_children:
                    return target.model_copy(update={"variant": DIRECTORY_VARIANT})
                return target
        return self.active_tab

    @property
    def display_title(self) -> str:
        if self.is_deep_view:
            target = self.target_node
            if target is not None:
                return target.title
        active = self.active_tab
        if active is not None:
            return active.title
        return self._root.title

    @property
    def breadcrumbs(self) -> List[BreadcrumbItem]:
        items = [BreadcrumbItem(id=self._root.id, title=self._root.title, path_index=0, is_root=True)]
        path = self.target_path
        if len(path) > 1:
            for index, node_id in enumerate(path[1:], start=1):
                node = find_node_by_id(self._root, node_id)
                items.append(BreadcrumbItem(id=node_id, title=node.title if node else "Unknown", path_index=index))
        else:
            active = self.active_tab
            if active is not None:
                items.append(BreadcrumbItem(id=active.id, title=active.title, path_index=1))
        return items

    # --------------- Transitions ---------------
    def navigate_to_node(self, node_id: str) -> bool:
        """Target ``node_id`` if it is reachable from the root."""
        if find_path_to_node(self._root, node_id) is None:
            logger.warning(f"Ignoring navigation to unreachable node {node_id}")
            return False
        self._set_target(node_id)
        return True

    def navigate_back(self) -> bool:
        """Pop one level; no-op at the root."""
        path = self.target_path
        if len(path) <= 1:
            return False
        self._set_target(path[-2])
        return True

    def navigate_to_level(self, index: int) -> bool:
        """Jump to ``target_path[index]`` (breadcrumb click)."""
        path = self.target_path
        if index < 0 or index >= len(path):
            return False
        self._set_target(path[index])
        return True

    def select_tab(self, tab_id: str) -> bool:
        if tab_id not in self.tab_ids:
            logger.warning(f"Ignoring selection of unknown tab {tab_id}")
            return False
        self._set_target(tab_id)
        return True

    def reset(self) -> None:
        self._set_target(None)

    def replace_tree(self, root: Node) -> None:
        """Swap in a new tree snapshot; the target is kept and re-derived."""
        self._root = root
        self._notify()

    # --------------- Back button ---------------
    def handle_back(self) -> bool:
        """Deep view pops one level; a non-default tab returns to the default tab."""
        if self.is_deep_view:
            return self.navigate_back()
        default_tab = self.default_tab_id
        if default_tab is not None and self.active_tab_id != default_tab:
            self._set_target(default_tab)
            return True
        return False

    def bind_back_button(
        self,
        dispatcher: BackButtonDispatcher,
        priority: int = 15,
        handler_id: Optional[str] = None,
    ) -> BackHandlerRegistration:
        return dispatcher.register(handler_id or f"shell:{self._root.id}", priority, self.handle_back)

    # --------------- Listeners ---------------
    def subscribe(self, listener: NavigationListener) -> Callable[[], None]:
        """Call ``listener(target_node_id, target_path)`` after each change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_target(self, node_id: Optional[str]) -> None:
        self._target_node_id = node_id
        self._notify()

    def _notify(self) -> None:
        self._revision += 1
        path = self.target_path
        for listener in list(self._listeners):
            listener(self._target_node_id, path)
        if self._publisher is not None:
            self._publisher.publish(
                NavigationChanged(
                    event_id="",
                    timestamp=None,
                    aggregate_id=self._root.id,
                    target_node_id=self._target_node_id,
                    target_path=path,
                )
            )


_shell_navigation: ContextVar[Optional[ShellNavigation]] = ContextVar("shell_navigation", default=None)


@contextmanager
def provide_shell_navigation(navigation: ShellNavigation) -> Generator[ShellNavigation, None, None]:
    token = _shell_navigation.set(navigation)
    try:
        yield navigation
    finally:
        _shell_navigation.reset(token)


def use_shell_navigation() -> Optional[ShellNavigation]:
    """Navigation state of the enclosing shell, or None outside one."""
    return _shell_navigation.get()
