from fastapi import APIRouter, Depends

from node_engine.application.render_service import RenderService
from node_engine.dependencies import get_render_service
from node_engine.schemas.api_schemas import ContextMenuRequest, ContextMenuResponse

router = APIRouter()

@router.post("/context-menu/resolve", response_model=ContextMenuResponse)
def resolve_context_menu(
    request: ContextMenuRequest,
    service: RenderService = Depends(get_render_service)
):
    """
    Resolve the effective context menu of a node: its own menu, else its parent's child menu.
    """
    config = service.resolve_context_menu(request.tree, request.node_id)
    if config is None:
        return ContextMenuResponse(node_id=request.node_id, suppressed=True, options=[])
    return ContextMenuResponse(
        node_id=request.node_id,
        suppressed=False,
        options=[option.model_dump(mode="json", exclude_none=True) for option in config.options],
    )
