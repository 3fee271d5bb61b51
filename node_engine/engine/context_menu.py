"""Context-menu resolution and menu state."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional

from node_engine.domain.menus import ContextMenuConfig, ContextMenuOption
from node_engine.domain.metadata import child_context_menu_of, context_menu_of
from node_engine.domain.node import Node
from node_engine.domain.specifications import specification_for_show_if
from node_engine.engine.back_button import BackButtonDispatcher, BackHandlerRegistration

logger = logging.getLogger(__name__)

OptionHandler = Callable[[Node, ContextMenuOption], None]


def is_option_visible(option: ContextMenuOption, metadata: Dict) -> bool:
    return specification_for_show_if(option.show_if).is_satisfied_by(metadata)


class ContextMenuResolver:
    """Effective menu for a node: item config, else the parent's child config.

    The source is chosen before ``show_if`` filtering; a source whose options
    are all hidden resolves to None (menu suppressed).
    """

    def resolve(self, node: Node, parent_node: Optional[Node] = None) -> Optional[ContextMenuConfig]:
        config = self.resolve_unfiltered(node, parent_node)
        if config is None:
            return None
        visible = [option for option in config.options if is_option_visible(option, node.metadata)]
        if not visible:
            return None
        return ContextMenuConfig(options=visible)

    def resolve_unfiltered(self, node: Node, parent_node: Optional[Node] = None) -> Optional[ContextMenuConfig]:
        item_config = context_menu_of(node)
        if item_config is not None and not item_config.is_empty:
            return item_config
        parent_config = child_context_menu_of(parent_node)
        if parent_config is not None and not parent_config.is_empty:
            return parent_config
        return None


@dataclass(frozen=True)
class ContextMenuState:
    is_open: bool = False
    node: Optional[Node] = None
    parent_node: Optional[Node] = None
    config: Optional[ContextMenuConfig] = None


@dataclass
class ContextMenuHandlers:
    on_edit: Optional[OptionHandler] = None
    on_delete: Optional[OptionHandler] = None
    on_move: Optional[OptionHandler] = None
    on_move_to_column: Optional[OptionHandler] = None
    on_navigate: Optional[OptionHandler] = None
    on_custom: Optional[OptionHandler] = None

    def for_action(self, action_type: str) -> Optional[OptionHandler]:
        return getattr(self, f"on_{action_type}", None)


class ContextMenuController:
    """Open/closed menu state plus routing of option clicks to host handlers."""

    def __init__(self, resolver: Optional[ContextMenuResolver] = None) -> None:
        self._resolver = resolver or ContextMenuResolver()
        self._state = ContextMenuState()
        self._handlers = ContextMenuHandlers()

    @property
    def state(self) -> ContextMenuState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state.is_open

    def show(self, node: Node, parent_node: Optional[Node] = None) -> bool:
        """Open the menu for ``node``. Returns False (menu suppressed) when nothing resolves."""
        config = self._resolver.resolve(node, parent_node)
        if config is None:
            logger.debug(f"No context menu for node {node.id}")
            return False
        self._state = ContextMenuState(is_open=True, node=node, parent_node=parent_node, config=config)
        return True

    def hide(self) -> None:
        self._state = replace(self._state, is_open=False)

    def register_handlers(self, **handlers: OptionHandler) -> None:
        """Merge handlers (``on_edit=...``, ``on_delete=...``) into the current set."""
        for name, handler in handlers.items():
            if not hasattr(self._handlers, name):
                raise TypeError(f"Unknown context menu handler: {name}")
            setattr(self._handlers, name, handler)

    def handle_option_click(self, option: ContextMenuOption) -> bool:
        """Close the menu, then route the option to its handler."""
        node = self._state.node
        if node is None:
            return False
        self.hide()
        handler = self._handlers.for_action(option.action_type)
        if handler is None:
            logger.warning(f"No handler for context menu action '{option.action_type}'")
            return False
        handler(node, option)
        return True

    def handle_back(self) -> bool:
        """Back closes an open menu; otherwise it is not ours to consume."""
        if not self._state.is_open:
            return False
        self.hide()
        return True

    def bind_back_button(
        self, dispatcher: BackButtonDispatcher, priority: int = 100, handler_id: str = "context_menu"
    ) -> BackHandlerRegistration:
        return dispatcher.register(handler_id, priority, self.handle_back)
