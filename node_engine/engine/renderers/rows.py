"""Row renderers for leaf items."""
from __future__ import annotations

from typing import Optional

from node_engine.domain.node import Node
from node_engine.engine.actions import use_engine_actions_with_fallback
from node_engine.engine.behavior import trigger_node_behavior
from node_engine.engine.context import use_node, use_node_meta, use_parent_node
from node_engine.engine.elements import Element
from node_engine.engine.icons import IconName, resolve_icon
from node_engine.engine.slots import format_slot_value, use_slot

STATUS_ICONS = {
    "active": IconName.CIRCLE,
    "not_started": IconName.CIRCLE,
    "pending": IconName.CIRCLE,
    "in_progress": IconName.PLAY_CIRCLE,
    "completed": IconName.CHECK_CIRCLE,
    "done": IconName.CHECK_CIRCLE,
}

STATUS_LABELS = {
    "active": "Active",
    "not_started": "Not Started",
    "pending": "Pending",
    "in_progress": "In Progress",
    "completed": "Completed",
    "done": "Done",
}

PRIORITIES = ("low", "medium", "high", "critical")


def _indent() -> int:
    depth = use_node().depth
    return depth * 8 if depth > 0 else 0


def _is_completed(status: Optional[str]) -> bool:
    return status in ("completed", "done")


def list_row(node: Node) -> Element:
    status = str(use_node_meta("status") or "active")
    priority = use_node_meta("priority")
    due_date = use_node_meta("dueDate")

    children: list = [
        Element("status_icon", {"icon": STATUS_ICONS.get(status, IconName.CIRCLE).value, "status": status}),
        Element("title", {"struck": _is_completed(status)}, [node.title]),
    ]
    if priority:
        children.append(
            Element("badge", {"kind": "priority", "level": priority if priority in PRIORITIES else "low"}, [str(priority)])
        )
    if due_date:
        children.append(Element("badge", {"kind": "due"}, [format_slot_value(due_date, "date")]))

    return Element(
        "list_row",
        {"node_id": node.id, "status": status, "indent": _indent(), "color": use_node_meta("color")},
        children,
    )


def row_simple(node: Node) -> Element:
    """Single-line row; with ``target_id`` it becomes a navigation link."""
    actions = use_engine_actions_with_fallback()
    headline = str(use_slot("headline") or node.title)
    target_id = use_slot("target_id")
    show_chevron = bool(use_slot("show_chevron", bool(target_id)))

    children: list = []
    icon_start = use_slot("icon_start")
    if icon_start:
        children.append(
            Element("icon", {"icon": resolve_icon(icon_start, IconName.CIRCLE).value, "color": use_slot("icon_color", "#71717a")})
        )
    children.append(Element("headline", {}, [headline]))
    badge = use_slot("badge")
    if badge:
        level = str(badge).lower()
        children.append(Element("badge", {"level": level if level in PRIORITIES else "low"}, [str(badge)]))
    badge_date = use_slot("badge_date", field_type="date")
    if badge_date:
        children.append(Element("badge", {"kind": "date"}, [badge_date]))
    if show_chevron:
        children.append(Element("chevron", {"icon": IconName.CHEVRON_RIGHT.value}))

    handlers = {}
    if target_id:
        handlers["on_click"] = lambda: actions.on_navigate_into(target_id, headline, "")

    return Element(
        "row_simple",
        {
            "node_id": node.id,
            "indent": _indent(),
            "clickable": bool(target_id),
            "border_color": use_slot("border_color"),
        },
        children,
        handlers=handlers,
    )


def row_detail_check(node: Node) -> Element:
    """Status toggle, headline with subtext and badges, optional avatar.

    Clicking the status runs the node's declared behavior (status cycling when
    none is declared); a long press opens the node's context menu.
    """
    actions = use_engine_actions_with_fallback()
    parent = use_parent_node()

    status = str(use_slot("status") or "active")
    completed = _is_completed(status)

    body: list = [Element("headline", {"struck": completed}, [str(use_slot("headline") or node.title)])]
    subtext = use_slot("subtext")
    if subtext:
        body.append(Element("subtext", {}, [str(subtext)]))

    badges = []
    for slot, field_type in (("badge_1", None), ("badge_2", "date"), ("badge_3", None)):
        value = use_slot(slot, field_type=field_type)
        if value:
            badges.append(Element("badge", {"slot": slot, "icon": use_slot(f"{slot}_icon")}, [str(value)]))
    if badges:
        body.append(Element("badges", {}, badges))

    children: list = [
        Element(
            "status_toggle",
            {
                "icon": STATUS_ICONS.get(status, IconName.CIRCLE).value,
                "status": status,
                "label": STATUS_LABELS.get(status, status),
            },
            handlers={"on_click": lambda: trigger_node_behavior(node, actions)},
        ),
        Element("body", {}, body),
    ]

    end_element = use_slot("end_element")
    if end_element:
        if isinstance(end_element, dict):
            avatar = {"src": end_element.get("avatar"), "name": end_element.get("name")}
        else:
            avatar = {"src": str(end_element), "name": None}
        children.append(Element("avatar", avatar))

    return Element(
        "row_detail_check",
        {
            "node_id": node.id,
            "status": status,
            "completed": completed,
            "indent": _indent(),
            "interactive": actions.is_interactive,
        },
        children,
        handlers={"on_long_press": lambda: actions.on_open_context_menu(node, parent)},
    )
