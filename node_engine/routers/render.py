from fastapi import APIRouter, Depends

from node_engine.application.render_service import RenderService
from node_engine.dependencies import get_render_service
from node_engine.engine.navigation import ShellNavigation
from node_engine.schemas.api_schemas import (
    BreadcrumbSchema,
    DegradedNode,
    NavigationState,
    RenderRequest,
    RenderResponse,
)

router = APIRouter()


def navigation_state(navigation: ShellNavigation) -> NavigationState:
    viewport = navigation.viewport_node
    return NavigationState(
        target_node_id=navigation.target_node_id,
        target_path=navigation.target_path,
        active_tab_id=navigation.active_tab_id,
        is_deep_view=navigation.is_deep_view,
        is_at_tab_root=navigation.is_at_tab_root,
        show_back_button=navigation.show_back_button,
        display_title=navigation.display_title,
        viewport_node_id=viewport.id if viewport else None,
        viewport_variant=viewport.variant if viewport else None,
        breadcrumbs=[
            BreadcrumbSchema(id=item.id, title=item.title, path_index=item.path_index, is_root=item.is_root)
            for item in navigation.breadcrumbs
        ],
    )


@router.post("/render", response_model=RenderResponse)
def render_tree(
    request: RenderRequest,
    service: RenderService = Depends(get_render_service)
):
    """
    Render a node tree into its serialized element tree.
    Unknown variants degrade to a type default or the debug renderer and are listed in `degraded`.
    """
    result = service.render(request.tree, target_node_id=request.target_node_id)
    return RenderResponse(
        root_id=result.tree.root_id,
        node_count=result.tree.node_count,
        degraded=[DegradedNode(**entry) for entry in result.degraded],
        navigation=navigation_state(result.navigation),
        root=result.tree.root.to_dict(),
    )
