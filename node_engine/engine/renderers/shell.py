"""App shell renderer: title bar, breadcrumbs, viewport and bottom tabs."""
from __future__ import annotations

import logging
from typing import List, Optional

from node_engine.domain.behaviors import CustomBehavior
from node_engine.domain.menus import ActionOption, CreateOption
from node_engine.domain.node import Node
from node_engine.engine.actions import EngineActions, use_engine_actions_with_fallback
from node_engine.engine.context import RenderContext, use_node, use_node_meta
from node_engine.engine.elements import Element, RenderedNode
from node_engine.engine.icons import IconName, parse_icon_spec, resolve_icon
from node_engine.engine.navigation import ShellNavigation, use_shell_navigation
from node_engine.engine.shell_action import HeaderOption, ShellAction, provide_shell_action
from node_engine.engine.view_engine import current_engine

logger = logging.getLogger(__name__)


def select_header_option(action: ShellAction, option: HeaderOption, actions: EngineActions) -> None:
    """Run one entry of the header action dropdown."""
    if isinstance(option, CreateOption):
        actions.on_open_create_form(option.type, action.parent_id)
    elif isinstance(option, ActionOption) and option.action_type == "create":
        actions.on_open_create_form(option.create_node_type, action.parent_id)
    elif isinstance(option, ActionOption) and option.action_type == "navigate":
        if option.target_id:
            actions.on_navigate_into(option.target_id, option.label, "")
        else:
            logger.warning(f"Header option '{option.id}' navigates without a target_id")
    elif isinstance(option, ActionOption) and option.action_type == "custom":
        behavior = CustomBehavior(
            action=option.custom_handler or option.id,
            target=option.target_id,
            payload=option.custom_payload,
        )
        actions.on_trigger_behavior(action.node, behavior)


def _navigation_for(node: Node) -> ShellNavigation:
    navigation = use_shell_navigation()
    if navigation is not None and navigation.root.id == node.id:
        return navigation
    # Rendered without a host navigation state: show the default tab
    return ShellNavigation(node)


def _render_viewport(navigation: ShellNavigation, context: RenderContext) -> Optional[RenderedNode]:
    viewport = navigation.viewport_node
    engine = current_engine()
    if viewport is None or engine is None:
        return None
    # Depth and parent follow the viewport's real position under the shell
    path = navigation.target_path
    if len(path) > 1:
        parent_id, depth = path[-2], context.depth + len(path) - 1
    else:
        parent_id, depth = context.node.id, context.depth + 1
    return engine.render_node(
        viewport,
        depth=depth,
        root_id=context.root_id,
        parent_id=parent_id,
        root_node=context.root_node,
    )


def _header_action(action: ShellAction, actions: EngineActions) -> Element:
    options = [
        Element(
            "option",
            {
                "label": option.label,
                "icon": resolve_icon(
                    option.icon,
                    IconName.FOLDER if isinstance(option, CreateOption) and option.type == "folder" else IconName.CHECK,
                ).value,
            },
            [option.label],
            handlers={"on_click": lambda option=option: select_header_option(action, option, actions)},
        )
        for option in action.options
    ]
    return Element(
        "header_action",
        {"label": action.label, "icon": resolve_icon(action.icon, IconName.PLUS).value, "parent_id": action.parent_id},
        options,
    )


def _breadcrumbs(navigation: ShellNavigation) -> Element:
    crumbs = navigation.breadcrumbs
    items: List[Element] = []
    for index, crumb in enumerate(crumbs):
        is_current = index == len(crumbs) - 1
        handlers = {}
        if not is_current:
            handlers["on_click"] = lambda level=crumb.path_index: navigation.navigate_to_level(level)
        items.append(
            Element(
                "crumb",
                {"id": crumb.id, "path_index": crumb.path_index, "is_root": crumb.is_root, "current": is_current},
                [crumb.title],
                handlers=handlers,
            )
        )
    return Element("breadcrumbs", {}, items)


def _tab_bar(node: Node, navigation: ShellNavigation) -> Element:
    active_tab_id = navigation.active_tab_id
    tabs = [
        Element(
            "tab",
            {
                "id": child.id,
                "icon": resolve_icon(child.metadata.get("icon")).value,
                "active": child.id == active_tab_id,
            },
            [child.title],
            handlers={"on_click": lambda tab_id=child.id: navigation.select_tab(tab_id)},
        )
        for child in node.child_nodes
    ]
    return Element("tab_bar", {}, tabs)


def layout_app_shell(node: Node) -> Element:
    """Shell layout whose children are tabs.

    The viewport shows the navigation target: the active tab at tab level, or
    the deep node (containers as a directory) below it. The header action is
    whatever the view in the viewport published while rendering.
    """
    context = use_node()
    navigation = _navigation_for(node)
    actions = use_engine_actions_with_fallback()

    with provide_shell_action() as action_slot:
        viewport = _render_viewport(navigation, context)
    shell_action = action_slot.action

    title_row: List[Element] = []
    if navigation.show_back_button:
        title_row.append(
            Element("back_button", {"label": "Go back"}, handlers={"on_click": navigation.navigate_back})
        )
    app_icon, app_color = parse_icon_spec(use_node_meta("icon"), IconName.LAYOUT_GRID)
    title_row.append(Element("app_icon", {"icon": app_icon.value, "color": app_color}))
    title_row.append(Element("title", {}, [navigation.display_title]))
    if shell_action is not None:
        title_row.append(_header_action(shell_action, actions))

    header: List[Element] = [Element("title_row", {}, title_row)]
    if len(navigation.breadcrumbs) >= 2:
        header.append(_breadcrumbs(navigation))

    children: List[Element] = [
        Element("header", {}, header),
        Element(
            "viewport",
            {"node_id": viewport.node_id if viewport else None},
            [viewport] if viewport is not None else [Element("empty", {}, ["No content available"])],
        ),
    ]
    if node.has_children:
        children.append(_tab_bar(node, navigation))

    return Element(
        "layout_app_shell",
        {
            "node_id": node.id,
            "target_node_id": navigation.target_node_id,
            "target_path": navigation.target_path,
            "active_tab_id": navigation.active_tab_id,
            "is_deep_view": navigation.is_deep_view,
            "display_title": navigation.display_title,
        },
        children,
    )
