from fastapi import APIRouter, Depends

from node_engine.application.tree_validation_service import TreeValidationService
from node_engine.dependencies import get_tree_validation_service
from node_engine.domain.node import count_nodes
from node_engine.infrastructure.resource_tree_adapter import resources_to_node_tree
from node_engine.schemas.api_schemas import (
    FieldErrorSchema,
    ResourceTreeRequest,
    ResourceTreeResponse,
    TreeValidationRequest,
    TreeValidationResponse,
)

router = APIRouter()

@router.post("/nodes/validate", response_model=TreeValidationResponse)
def validate_tree(
    request: TreeValidationRequest,
    validator: TreeValidationService = Depends(get_tree_validation_service)
):
    """
    Validate an untrusted node tree without rendering it.
    Always answers 200; problems are listed in `errors`.
    """
    if request.require_uuid is not None:
        validator = TreeValidationService(require_uuid=request.require_uuid)
    result = validator.validate(request.tree)
    return TreeValidationResponse(
        valid=result.valid,
        errors=[FieldErrorSchema(**error) for error in result.errors],
        node_count=count_nodes(result.node),
    )

@router.post("/nodes/from-resources", response_model=ResourceTreeResponse)
def build_tree_from_resources(request: ResourceTreeRequest):
    """
    Build a node tree from flat resource rows linked by `parent_id`.
    """
    root = resources_to_node_tree(request.resources, request.root_id)
    if root is None:
        return ResourceTreeResponse(tree=None, node_count=0)
    return ResourceTreeResponse(tree=root.to_json_dict(), node_count=count_nodes(root))
