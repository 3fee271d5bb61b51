"""Engine actions: the callback bundle renderers use instead of touching data stores.

A live bundle is wired by the host (see ``create_engine_actions``); outside
any live context renderers get the inert ``EngineActions.no_op()`` bundle of
identical shape, so they only consult ``is_interactive`` for affordances.
"""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import datetime
from functools import partial
from typing import TYPE_CHECKING, Any, Callable, Generator, Optional

from node_engine.domain.behaviors import BehaviorConfig
from node_engine.domain.entities import ResourceEntity
from node_engine.domain.metadata import string_meta
from node_engine.domain.node import Node, NodeType

if TYPE_CHECKING:
    from node_engine.engine.behavior import BehaviorDispatcher
    from node_engine.engine.context_menu import ContextMenuController
    from node_engine.engine.navigation import ShellNavigation

NODE_TYPE_TO_RESOURCE_TYPE = {
    NodeType.CONTAINER: "folder",
    NodeType.COLLECTION: "project",
}


def node_to_resource(node: Node, root_id: Optional[str] = None) -> ResourceEntity:
    """Rebuild the minimal persisted record a mutation expects from a node.

    The node is a view-layer projection; fields the projection dropped are
    recovered from metadata or given neutral defaults.
    """
    metadata = node.metadata
    now = datetime.now().isoformat()
    duration = node.duration_minutes if node.duration_minutes is not None else metadata.get("duration_minutes")
    scheduled_at = string_meta(node, "scheduled_at")

    return ResourceEntity(
        id=node.id,
        user_id="",  # filled in by the mutation layer
        household_id=None,
        parent_id=string_meta(node, "parent_id") or root_id,
        path=string_meta(node, "path", "root"),
        type=NODE_TYPE_TO_RESOURCE_TYPE.get(node.type, "task"),
        title=node.title,
        description=string_meta(node, "description"),
        status=string_meta(node, "status", "active"),
        meta_data=dict(metadata),
        is_schedulable=bool(scheduled_at),
        scheduled_at=scheduled_at,
        created_at=string_meta(node, "created_at", now),
        updated_at=string_meta(node, "updated_at", now),
        deleted_at=None,
        created_by=None,
        pointer_table=node.pointer_table or string_meta(node, "pointer_table"),
        pointer_id=node.pointer_id or string_meta(node, "pointer_id"),
        duration_minutes=duration if isinstance(duration, int) else 0,
    )


def _no_op(*args: Any, **kwargs: Any) -> None:
    return None


@dataclass(frozen=True)
class EngineActions:
    """Actions available to renderers for one render pass."""
    root_id: Optional[str]
    current_parent_id: Optional[str]
    on_open_create_form: Callable[[str, str], None]
    on_navigate_into: Callable[[str, str, str], None]
    on_open_context_menu: Callable[[Node, Optional[Node]], None]
    on_cycle_status: Callable[[ResourceEntity], None]
    on_trigger_behavior: Callable[[Node, BehaviorConfig], None]
    on_open_note: Callable[[Node], None]
    on_move_node: Callable[[str, str], None]
    node_to_resource: Callable[[Node], ResourceEntity]
    is_interactive: bool = True

    @classmethod
    def no_op(cls, root_id: Optional[str] = None) -> EngineActions:
        """Inert bundle for previews and sandboxes."""
        return cls(
            root_id=root_id,
            current_parent_id=None,
            on_open_create_form=_no_op,
            on_navigate_into=_no_op,
            on_open_context_menu=_no_op,
            on_cycle_status=_no_op,
            on_trigger_behavior=_no_op,
            on_open_note=_no_op,
            on_move_node=_no_op,
            node_to_resource=partial(node_to_resource, root_id=root_id),
            is_interactive=False,
        )


_engine_actions: ContextVar[Optional[EngineActions]] = ContextVar("engine_actions", default=None)


@contextmanager
def provide_engine_actions(actions: EngineActions) -> Generator[EngineActions, None, None]:
    token = _engine_actions.set(actions)
    try:
        yield actions
    finally:
        _engine_actions.reset(token)


def use_engine_actions() -> Optional[EngineActions]:
    """The live bundle, or None outside an actions scope."""
    return _engine_actions.get()


def use_engine_actions_with_fallback() -> EngineActions:
    actions = _engine_actions.get()
    if actions is not None:
        return actions
    return EngineActions.no_op()


def create_engine_actions(
    root_id: Optional[str],
    dispatcher: BehaviorDispatcher,
    navigation: Optional[ShellNavigation] = None,
    context_menu: Optional[ContextMenuController] = None,
    current_parent_id: Optional[str] = None,
    on_open_create_form: Optional[Callable[[str, str], None]] = None,
    on_open_note: Optional[Callable[[Node], None]] = None,
) -> EngineActions:
    """Wire a live bundle to a behavior dispatcher and the shell collaborators."""

    def navigate_into(node_id: str, title: str = "", path: str = "") -> None:
        if navigation is not None:
            navigation.navigate_to_node(node_id)

    def open_context_menu(node: Node, parent_node: Optional[Node] = None) -> None:
        if context_menu is not None:
            context_menu.show(node, parent_node)

    return EngineActions(
        root_id=root_id,
        current_parent_id=current_parent_id,
        on_open_create_form=on_open_create_form or _no_op,
        on_navigate_into=navigate_into,
        on_open_context_menu=open_context_menu,
        on_cycle_status=dispatcher.cycle_status,
        on_trigger_behavior=dispatcher.trigger,
        on_open_note=on_open_note or _no_op,
        on_move_node=dispatcher.move_node,
        node_to_resource=partial(node_to_resource, root_id=root_id),
        is_interactive=True,
    )
