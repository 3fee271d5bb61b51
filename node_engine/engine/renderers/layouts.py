"""Structural renderers: stacks, cards and directory views."""
from __future__ import annotations

from typing import List

from node_engine.domain.node import Node
from node_engine.engine.actions import use_engine_actions_with_fallback
from node_engine.engine.aggregation import aggregation_config_of, use_data_aggregation
from node_engine.engine.context import (
    provide_siblings,
    use_child_count,
    use_is_root,
    use_node,
    use_node_meta,
    use_siblings_with_fallback,
)
from node_engine.engine.elements import Element, RenderedNode
from node_engine.engine.icons import IconName, resolve_icon
from node_engine.engine.shell_action import publish_shell_action
from node_engine.engine.slots import use_slot
from node_engine.engine.view_engine import render_children, use_render_children

DEFAULT_ACCENT = "#06b6d4"
EMPTY_PLACEHOLDER = "No items yet"


def filter_children(node: Node, query: str) -> List[Node]:
    """Children whose title or description contains ``query`` (case-insensitive)."""
    children = node.child_nodes
    query = (query or "").strip().lower()
    if not query:
        return children
    matches = []
    for child in children:
        description = child.metadata.get("description")
        if query in child.title.lower():
            matches.append(child)
        elif isinstance(description, str) and query in description.lower():
            matches.append(child)
    return matches


def _render_filtered(node: Node, query: str) -> List[RenderedNode]:
    context = use_node()
    children = filter_children(node, query)
    if len(children) == len(node.child_nodes):
        return use_render_children()()
    filtered = node.model_copy(update={"children": children})
    return render_children(filtered, context.depth, context.root_id, context.root_node)


def container_stack(node: Node) -> Element:
    """Collapsible folder: header with icon, title and child count, then the children."""
    child_count = use_child_count()
    color = use_node_meta("color", DEFAULT_ACCENT)
    description = use_node_meta("description")

    children: list = [
        Element(
            "header",
            {"icon": resolve_icon(use_node_meta("icon"), IconName.FOLDER).value, "color": color},
            [node.title],
        )
    ]
    if description:
        children.append(Element("description", {}, [str(description)]))
    if child_count:
        children.append(Element("children", {}, list(use_render_children()())))
    else:
        children.append(Element("empty", {}, ["Empty container"]))

    return Element(
        "container_stack",
        {"node_id": node.id, "child_count": child_count, "is_root": use_is_root(), "color": color},
        children,
    )


def grid_card(node: Node) -> Element:
    context = use_node()
    siblings, index = use_siblings_with_fallback(node)
    props = {
        "node_id": node.id,
        "color": use_node_meta("color", DEFAULT_ACCENT),
        "image_url": use_node_meta("imageUrl"),
        "semantic_type": use_node_meta("semanticType"),
        "child_count": use_child_count(),
        "indent": context.depth * 8 if context.depth > 0 else 0,
        "index": index,
        "sibling_count": len(siblings),
    }
    children: list = [Element("title", {}, [node.title])]
    description = use_node_meta("description")
    if description:
        children.append(Element("description", {}, [str(description)]))
    stats = {key: use_node_meta(key) for key in ("prepTime", "cookTime", "servings", "duration")}
    stats = {key: value for key, value in stats.items() if value is not None}
    if stats:
        children.append(Element("stats", stats))
    aggregation = aggregation_config_of(node)
    if aggregation is not None:
        summary = use_data_aggregation(aggregation)
        segments = [
            Element("segment", {"value": item.value, "color": item.color, "percentage": item.percentage}, [item.label])
            for item in summary.items
        ]
        summary_props = {
            "total": summary.total,
            "operation": aggregation.operation.value,
            "node_count": summary.node_count,
        }
        children.append(Element("summary", summary_props, segments))
    return Element("grid_card", props, children)


def view_list_stack(node: Node) -> Element:
    """Vertical list of children sharing one sibling scope."""
    headline = str(use_slot("headline") or node.title)
    subtext = use_slot("subtext")
    accent = use_slot("accent_color", DEFAULT_ACCENT)
    query = str(use_slot("search_query", "") or "")

    with provide_siblings(filter_children(node, query)):
        rendered = _render_filtered(node, query)

    children: list = [Element("header", {"color": accent}, [headline])]
    if subtext:
        children.append(Element("subtext", {}, [str(subtext)]))
    if rendered:
        children.append(Element("list", {}, list(rendered)))
    elif node.has_children:
        children.append(Element("empty", {}, ["No matches"]))
    else:
        children.append(Element("empty", {}, [str(use_slot("placeholder", EMPTY_PLACEHOLDER))]))

    publish_shell_action(node)
    return Element(
        "view_list_stack",
        {"node_id": node.id, "child_count": use_child_count(), "is_root": use_is_root()},
        children,
    )


def view_directory(node: Node) -> Element:
    """Searchable directory: search bar, "new" button and the child list."""
    actions = use_engine_actions_with_fallback()
    query = str(use_slot("search_query", "") or "")
    show_action_button = bool(use_slot("show_action_button", True)) and actions.is_interactive

    top_bar: list = [
        Element(
            "search",
            {"placeholder": use_slot("search_placeholder", "Search..."), "value": query},
        )
    ]
    if show_action_button:
        top_bar.append(
            Element(
                "action_button",
                {"label": use_slot("action_label", "New"), "icon": IconName.PLUS.value},
                handlers={
                    "on_create_folder": lambda: actions.on_open_create_form("folder", node.id),
                    "on_create_task": lambda: actions.on_open_create_form("task", node.id),
                },
            )
        )

    with provide_siblings(filter_children(node, query)):
        rendered = _render_filtered(node, query)

    if rendered:
        body = Element("list", {}, list(rendered))
    elif node.has_children:
        body = Element("empty", {"filtered": True}, [f'No results for "{query.strip()}"'])
    else:
        body = Element("empty", {"filtered": False}, [str(use_slot("placeholder", EMPTY_PLACEHOLDER))])

    publish_shell_action(node)
    return Element(
        "view_directory",
        {"node_id": node.id, "child_count": use_child_count(), "result_count": len(rendered)},
        [Element("top_bar", {}, top_bar), body],
    )
