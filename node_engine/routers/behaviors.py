from fastapi import APIRouter, Depends

from node_engine.application.render_service import RenderService
from node_engine.dependencies import get_mutation_port, get_render_service
from node_engine.infrastructure.recording_mutation_port import RecordingMutationPort
from node_engine.schemas.api_schemas import BehaviorRequest, BehaviorResponse

router = APIRouter()

@router.post("/behaviors/trigger", response_model=BehaviorResponse)
def trigger_behavior(
    request: BehaviorRequest,
    service: RenderService = Depends(get_render_service),
    mutations: RecordingMutationPort = Depends(get_mutation_port)
):
    """
    Run a node's behavior (or the one given) and return the mutation intents it produced.
    """
    result = service.trigger_behavior(request.tree, request.node_id, mutations, behavior=request.behavior)
    return BehaviorResponse(
        node_id=result.node_id,
        behavior=result.behavior.to_config() if result.behavior is not None else None,
        mutations=[record.to_dict() for record in mutations.records],
    )
