from fastapi import APIRouter, Depends

from node_engine.application.render_service import RenderService
from node_engine.dependencies import get_render_service
from node_engine.routers.render import navigation_state
from node_engine.schemas.api_schemas import NavigationRequest, NavigationResponse

router = APIRouter()

@router.post("/navigation/resolve", response_model=NavigationResponse)
def resolve_navigation(
    request: NavigationRequest,
    service: RenderService = Depends(get_render_service)
):
    """
    Apply navigation operations to a shell tree and return the resulting state.
    `back` goes through the back-button chain, so it is a no-op at the default tab.
    """
    navigation, results = service.navigate(
        request.tree,
        target_node_id=request.target_node_id,
        operations=[(operation.op, operation.value) for operation in request.operations],
    )
    return NavigationResponse(state=navigation_state(navigation), results=results)
