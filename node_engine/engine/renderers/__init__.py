"""Built-in renderers and the default registry."""
from typing import Dict, Optional

from node_engine.config import Settings, settings as default_settings
from node_engine.domain.events import DomainEventPublisher
from node_engine.engine.registry import Renderer, VariantRegistry

from .debug import debug_node
from .layouts import container_stack, grid_card, view_directory, view_list_stack
from .rows import list_row, row_detail_check, row_simple
from .shell import layout_app_shell, select_header_option

BUILTIN_VARIANTS: Dict[str, Renderer] = {
    "container_stack": container_stack,
    "grid_card": grid_card,
    "list_row": list_row,
    "row_simple": row_simple,
    "row_detail_check": row_detail_check,
    "view_list_stack": view_list_stack,
    "view_directory": view_directory,
    "layout_app_shell": layout_app_shell,
}


def build_default_registry(
    settings: Optional[Settings] = None,
    publisher: Optional[DomainEventPublisher] = None,
) -> VariantRegistry:
    """Registry with every built-in variant, the type defaults and the debug fallback."""
    settings = settings or default_settings
    registry = VariantRegistry(default_variants=settings.DEFAULT_VARIANTS, publisher=publisher)
    registry.register_many(BUILTIN_VARIANTS)
    registry.set_fallback(debug_node, name="debug_node")
    return registry


__all__ = [
    "BUILTIN_VARIANTS",
    "build_default_registry",
    "container_stack",
    "debug_node",
    "grid_card",
    "layout_app_shell",
    "list_row",
    "row_detail_check",
    "row_simple",
    "select_header_option",
    "view_directory",
    "view_list_stack",
]
