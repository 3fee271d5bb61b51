from fastapi import APIRouter, Depends

from node_engine.application.event_handlers import degraded_variant_tracker
from node_engine.dependencies import get_registry
from node_engine.engine.registry import VariantRegistry
from node_engine.schemas.api_schemas import VariantsResponse

router = APIRouter()

@router.get("/variants", response_model=VariantsResponse)
def list_variants(registry: VariantRegistry = Depends(get_registry)):
    """
    List registered variants, the per-type defaults and the fallback renderer.
    """
    return VariantsResponse(
        variants=sorted(registry.registered_variants()),
        type_defaults=registry.type_defaults(),
        fallback=registry.fallback_name,
        degraded_counts=degraded_variant_tracker.counts(),
    )
