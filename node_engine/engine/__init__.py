"""Rendering engine: registry, tree renderer, actions, navigation and menus."""
from .actions import EngineActions, create_engine_actions, node_to_resource, provide_engine_actions
from .back_button import BackButtonDispatcher, BackHandlerRegistration
from .behavior import BehaviorDispatcher, next_status, trigger_node_behavior
from .context import RenderContext, use_node
from .context_menu import ContextMenuController, ContextMenuResolver
from .elements import Element, RenderedNode, RenderedTree
from .navigation import BreadcrumbItem, ShellNavigation, provide_shell_navigation
from .registry import Resolution, ResolutionSource, VariantRegistry
from .view_engine import ViewEngine

__all__ = [
    "BackButtonDispatcher",
    "BackHandlerRegistration",
    "BehaviorDispatcher",
    "BreadcrumbItem",
    "ContextMenuController",
    "ContextMenuResolver",
    "Element",
    "EngineActions",
    "RenderContext",
    "RenderedNode",
    "RenderedTree",
    "Resolution",
    "ResolutionSource",
    "ShellNavigation",
    "VariantRegistry",
    "ViewEngine",
    "create_engine_actions",
    "next_status",
    "node_to_resource",
    "provide_engine_actions",
    "provide_shell_navigation",
    "trigger_node_behavior",
    "use_node",
]
