"""Application service composing the engine for one request's node tree."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from node_engine.application.tree_validation_service import TreeValidationService
from node_engine.domain.behaviors import BehaviorConfig
from node_engine.domain.errors import NotFoundError, ValidationError
from node_engine.domain.events import DomainEventPublisher
from node_engine.domain.menus import ContextMenuConfig
from node_engine.domain.node import Node, find_node_by_id, find_path_to_node
from node_engine.domain.ports import MutationPort
from node_engine.engine.actions import EngineActions, create_engine_actions, provide_engine_actions
from node_engine.engine.back_button import BackButtonDispatcher
from node_engine.engine.behavior import BehaviorDispatcher, trigger_node_behavior
from node_engine.engine.context_menu import ContextMenuResolver
from node_engine.engine.elements import RenderedTree
from node_engine.engine.navigation import ShellNavigation, provide_shell_navigation
from node_engine.engine.registry import VariantRegistry
from node_engine.engine.view_engine import ViewEngine

logger = logging.getLogger(__name__)

NavigationOperation = Tuple[str, Optional[Union[str, int]]]


@dataclass
class RenderResult:
    tree: RenderedTree
    navigation: ShellNavigation

    @property
    def degraded(self) -> List[Dict[str, Any]]:
        return [
            {
                "node_id": rendered.node_id,
                "variant": rendered.variant,
                "resolved_variant": rendered.resolved_variant,
                "resolution": rendered.resolution,
            }
            for rendered in self.tree.iter_rendered()
            if rendered.resolution != "exact"
        ]


@dataclass
class BehaviorResult:
    node_id: str
    behavior: Optional[BehaviorConfig]


class RenderService:
    """Validates an incoming tree and runs one engine operation against it.

    Every call works on its own tree snapshot and its own navigation state;
    the registry is the only shared collaborator.
    """

    def __init__(
        self,
        registry: VariantRegistry,
        validator: TreeValidationService,
        publisher: Optional[DomainEventPublisher] = None,
        memoize: bool = False,
        shell_back_priority: int = 15,
        cache_size: int = 512,
    ) -> None:
        self._registry = registry
        self._validator = validator
        self._publisher = publisher
        self._memoize = memoize
        self._cache_size = cache_size
        self._shell_back_priority = shell_back_priority
        self._menus = ContextMenuResolver()

    def load_tree(self, data: Any) -> Node:
        return self._validator.require_valid(data)

    # --------------- Rendering ---------------
    def render(self, data: Any, target_node_id: Optional[str] = None) -> RenderResult:
        root = self.load_tree(data)
        navigation = self._navigation(root, target_node_id)
        engine = ViewEngine(self._registry, memoize=self._memoize, cache_size=self._cache_size)

        with provide_shell_navigation(navigation), provide_engine_actions(EngineActions.no_op(root.id)):
            tree = engine.render(root)

        logger.info(f"Rendered tree {root.id} ({tree.node_count} nodes)")
        return RenderResult(tree=tree, navigation=navigation)

    # --------------- Navigation ---------------
    def navigate(
        self,
        data: Any,
        target_node_id: Optional[str] = None,
        operations: Sequence[NavigationOperation] = (),
    ) -> Tuple[ShellNavigation, List[bool]]:
        """Apply navigation operations in order; each reports whether it changed state."""
        root = self.load_tree(data)
        navigation = self._navigation(root, target_node_id)
        back_button = BackButtonDispatcher()
        navigation.bind_back_button(back_button, priority=self._shell_back_priority)

        results = []
        for op, value in operations:
            if op == "navigate":
                results.append(navigation.navigate_to_node(str(value)))
            elif op == "back":
                results.append(back_button.dispatch())
            elif op == "level":
                if not isinstance(value, int):
                    raise ValidationError("Navigation operation 'level' requires an integer value")
                results.append(navigation.navigate_to_level(value))
            elif op == "tab":
                results.append(navigation.select_tab(str(value)))
            elif op == "reset":
                navigation.reset()
                results.append(True)
            else:
                raise ValidationError(f"Unknown navigation operation: {op}")
        return navigation, results

    # --------------- Context menus ---------------
    def resolve_context_menu(self, data: Any, node_id: str) -> Optional[ContextMenuConfig]:
        root = self.load_tree(data)
        node, parent = self._require_node(root, node_id)
        return self._menus.resolve(node, parent)

    # --------------- Behaviors ---------------
    def trigger_behavior(
        self,
        data: Any,
        node_id: str,
        mutations: MutationPort,
        behavior: Optional[Mapping[str, Any]] = None,
    ) -> BehaviorResult:
        """Deliver a behavior for ``node_id``: the given one, else the node's own."""
        root = self.load_tree(data)
        node, _ = self._require_node(root, node_id)
        dispatcher = BehaviorDispatcher(mutations, publisher=self._publisher, root_id=root.id)

        if behavior is not None:
            config: Optional[BehaviorConfig] = dispatcher.trigger(node, behavior)
        else:
            config = trigger_node_behavior(node, create_engine_actions(root.id, dispatcher))
        return BehaviorResult(node_id=node.id, behavior=config)

    def _navigation(self, root: Node, target_node_id: Optional[str]) -> ShellNavigation:
        navigation = ShellNavigation(root, publisher=self._publisher)
        if target_node_id is not None and not navigation.navigate_to_node(target_node_id):
            raise NotFoundError(f"Node not found in tree: {target_node_id}")
        return navigation

    @staticmethod
    def _require_node(root: Node, node_id: str) -> Tuple[Node, Optional[Node]]:
        path = find_path_to_node(root, node_id)
        if path is None:
            raise NotFoundError(f"Node not found in tree: {node_id}")
        parent = find_node_by_id(root, path[-2]) if len(path) > 1 else None
        return find_node_by_id(root, node_id), parent
