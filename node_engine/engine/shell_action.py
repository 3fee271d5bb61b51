"""Header action published by the view inside a shell viewport.

The shell owns the header button, but the view in its viewport decides what
the button creates. A view publishes its action into the enclosing scope
while it renders; the shell reads the scope once its viewport is rendered.
"""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Generator, List, Optional, Tuple, Union

from node_engine.domain.menus import ActionOption, CreateOption, HeaderActionConfig
from node_engine.domain.metadata import create_options_of, header_action_of, string_meta
from node_engine.domain.node import Node

HeaderOption = Union[ActionOption, CreateOption]


@dataclass(frozen=True)
class ShellAction:
    label: str
    icon: str
    node: Node
    options: Tuple[HeaderOption, ...]

    @property
    def parent_id(self) -> str:
        return self.node.id


def shell_action_for(node: Node) -> Optional[ShellAction]:
    """Header action a view declares: ``header_action`` first, then legacy ``create_options``."""
    header: Optional[HeaderActionConfig] = header_action_of(node)
    if header is not None and header.options:
        return ShellAction(label=header.label, icon=header.icon, node=node, options=tuple(header.options))
    create_options: List[CreateOption] = create_options_of(node)
    if create_options:
        label = string_meta(node, "action_label", "Add")
        return ShellAction(label=label, icon="Plus", node=node, options=tuple(create_options))
    return None


class ShellActionSlot:
    """Holds the action of the most recently rendered view in one shell."""

    def __init__(self) -> None:
        self.action: Optional[ShellAction] = None
        self.publish_count = 0

    def set(self, action: Optional[ShellAction]) -> None:
        self.action = action
        self.publish_count += 1

    def clear(self) -> None:
        self.action = None


_shell_action: ContextVar[Optional[ShellActionSlot]] = ContextVar("shell_action", default=None)


@contextmanager
def provide_shell_action() -> Generator[ShellActionSlot, None, None]:
    slot = ShellActionSlot()
    token = _shell_action.set(slot)
    try:
        yield slot
    finally:
        _shell_action.reset(token)


def current_shell_action_slot() -> Optional[ShellActionSlot]:
    return _shell_action.get()


def publish_shell_action(node: Node) -> Optional[ShellAction]:
    """Publish ``node``'s header action to the enclosing shell, if any."""
    slot = _shell_action.get()
    if slot is None:
        return None
    action = shell_action_for(node)
    slot.set(action)
    return action
