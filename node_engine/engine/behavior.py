"""Behavior dispatch: turns declarative behavior configs into mutation intents."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from node_engine.domain.behaviors import (
    BehaviorConfig,
    CustomBehavior,
    LogEventBehavior,
    MoveNodeBehavior,
    ToggleStatusBehavior,
    UpdateFieldBehavior,
    parse_behavior,
)
from node_engine.domain.entities import ResourceEntity
from node_engine.domain.events import BehaviorTriggered, DomainEventPublisher
from node_engine.domain.metadata import behavior_of, declares_behavior, string_meta
from node_engine.domain.node import Node
from node_engine.domain.ports import MutationPort
from node_engine.engine.actions import EngineActions, node_to_resource, use_engine_actions_with_fallback

logger = logging.getLogger(__name__)

DEFAULT_STATUS_CYCLE = ("active", "completed", "archived")


def next_status(current: Optional[str], cycle: Sequence[str] = DEFAULT_STATUS_CYCLE) -> str:
    """Next status in ``cycle``; unknown statuses restart at the first one."""
    if current not in cycle:
        return cycle[0]
    return cycle[(list(cycle).index(current) + 1) % len(cycle)]


class BehaviorDispatcher:
    """Delivers each behavior intent to the mutation port exactly once.

    Failures raised by the port propagate to the caller unchanged; retry
    policy and optimistic-update reconciliation belong to the mutation layer.
    """

    def __init__(
        self,
        mutations: MutationPort,
        publisher: Optional[DomainEventPublisher] = None,
        root_id: Optional[str] = None,
    ) -> None:
        self._mutations = mutations
        self._publisher = publisher
        self._root_id = root_id

    def trigger(self, node: Node, behavior: Union[BehaviorConfig, Mapping[str, Any]]) -> BehaviorConfig:
        config = parse_behavior(dict(behavior) if isinstance(behavior, Mapping) else behavior)
        logger.info(f"Trigger behavior '{config.action}' on node {node.id}")

        if isinstance(config, UpdateFieldBehavior):
            self._mutations.update_metadata(node.id, {**node.metadata, config.target: config.payload})
        elif isinstance(config, ToggleStatusBehavior):
            self.cycle_status(node_to_resource(node, self._root_id))
        elif isinstance(config, MoveNodeBehavior):
            self.move_node(node.id, config.payload.parent_id, string_meta(node, "parent_id"))
        elif isinstance(config, LogEventBehavior):
            self._log_event(node, config.payload)
        elif isinstance(config, CustomBehavior):
            self._mutations.handle_custom(node.id, config.action, config.target, config.payload)

        if self._publisher is not None:
            self._publisher.publish(
                BehaviorTriggered(
                    event_id="",
                    timestamp=None,
                    aggregate_id=node.id,
                    node_id=node.id,
                    action=config.action,
                    config=config.to_config(),
                )
            )
        return config

    def cycle_status(self, resource: ResourceEntity) -> None:
        self._mutations.cycle_status(resource)

    def move_node(self, node_id: str, new_parent_id: str, old_parent_id: Optional[str] = None) -> None:
        self._mutations.move_node(node_id, new_parent_id, old_parent_id)

    def _log_event(self, node: Node, payload: Dict[str, Any]) -> None:
        now = datetime.now()
        title = payload.get("title") or "Event Logged"
        metadata = {
            "is_event": True,
            "timestamp": now.isoformat(),
            "description": payload.get("description") or now.strftime("%Y-%m-%d %H:%M:%S"),
            **payload,
        }
        self._mutations.create_node(node.id, "task", title, metadata)


def trigger_node_behavior(
    node: Node,
    actions: Optional[EngineActions] = None,
    default: Optional[BehaviorConfig] = None,
) -> Optional[BehaviorConfig]:
    """Run the interaction a node declares in ``metadata.behavior``.

    Without a declared behavior the renderer ``default`` is used, and without
    either the node's status is cycled. A declared but malformed behavior is
    dropped (it was logged when parsed) and nothing runs. Returns the behavior
    delivered, or None when none was.
    """
    actions = actions or use_engine_actions_with_fallback()
    if declares_behavior(node):
        behavior = behavior_of(node)
        if behavior is None:
            return None
    else:
        behavior = default
    if behavior is None:
        actions.on_cycle_status(actions.node_to_resource(node))
        return None
    actions.on_trigger_behavior(node, behavior)
    return behavior
