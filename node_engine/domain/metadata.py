"""Typed accessors for the metadata keys the engine itself interprets.

Every other metadata key is renderer-private and opaque to the engine. A
malformed value under a documented key is logged and treated as absent so
bad data degrades the UI instead of breaking it.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from node_engine.domain.behaviors import BehaviorConfig, parse_behavior
from node_engine.domain.errors import ValidationError
from node_engine.domain.menus import ContextMenuConfig, ContextMenuOption, CreateOption, HeaderActionConfig
from node_engine.domain.node import Node

logger = logging.getLogger(__name__)

CONTEXT_MENU_KEY = "context_menu"
CHILD_CONTEXT_MENU_KEY = "child_context_menu"
BEHAVIOR_KEY = "behavior"
HEADER_ACTION_KEY = "header_action"
CREATE_OPTIONS_KEY = "create_options"
DEFAULT_TAB_KEY = "default_tab_id"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse_config(node: Optional[Node], key: str, model: Type[ModelT]) -> Optional[ModelT]:
    if node is None:
        return None
    raw = node.metadata.get(key)
    if raw is None:
        return None
    try:
        return model.model_validate(raw)
    except PydanticValidationError as exc:
        logger.warning(f"Ignoring malformed metadata.{key} on node {node.id}: {exc.error_count()} error(s)")
        return None


def _parse_menu(node: Optional[Node], key: str) -> Optional[ContextMenuConfig]:
    """A menu whose ``options`` is a list; malformed options are skipped one by one."""
    if node is None:
        return None
    raw = node.metadata.get(key)
    if raw is None:
        return None
    if not isinstance(raw, dict) or not isinstance(raw.get("options"), list):
        logger.warning(f"Ignoring malformed metadata.{key} on node {node.id}: options must be a list")
        return None
    options = []
    for index, entry in enumerate(raw["options"]):
        try:
            options.append(ContextMenuOption.model_validate(entry))
        except PydanticValidationError as exc:
            logger.warning(f"Skipping malformed metadata.{key} option {index} on node {node.id}: {exc.error_count()} error(s)")
    return ContextMenuConfig(options=options)


def context_menu_of(node: Optional[Node]) -> Optional[ContextMenuConfig]:
    return _parse_menu(node, CONTEXT_MENU_KEY)


def child_context_menu_of(node: Optional[Node]) -> Optional[ContextMenuConfig]:
    return _parse_menu(node, CHILD_CONTEXT_MENU_KEY)


def header_action_of(node: Optional[Node]) -> Optional[HeaderActionConfig]:
    return _parse_config(node, HEADER_ACTION_KEY, HeaderActionConfig)


def declares_behavior(node: Node) -> bool:
    """True when the node carries a behavior entry, well-formed or not."""
    return node.metadata.get(BEHAVIOR_KEY) is not None


def behavior_of(node: Node) -> Optional[BehaviorConfig]:
    raw = node.metadata.get(BEHAVIOR_KEY)
    if raw is None:
        return None
    try:
        return parse_behavior(raw)
    except ValidationError as exc:
        logger.warning(f"Ignoring malformed metadata.behavior on node {node.id}: {exc}")
        return None


def create_options_of(node: Node) -> List[CreateOption]:
    raw = node.metadata.get(CREATE_OPTIONS_KEY)
    if not isinstance(raw, list):
        return []
    options = []
    for entry in raw:
        try:
            options.append(CreateOption.model_validate(entry))
        except PydanticValidationError:
            logger.warning(f"Skipping malformed create option on node {node.id}")
    return options


def default_tab_id_of(node: Node) -> Optional[str]:
    value = node.metadata.get(DEFAULT_TAB_KEY)
    return value if isinstance(value, str) and value else None


def string_meta(node: Node, key: str, default: Optional[str] = None) -> Optional[str]:
    value: Any = node.metadata.get(key)
    return value if isinstance(value, str) and value else default
