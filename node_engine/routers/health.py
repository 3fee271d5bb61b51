"""
Health check endpoints for the API.
"""
from fastapi import APIRouter, Depends
from typing import Dict, Any
from datetime import datetime

from node_engine.config import settings
from node_engine.dependencies import get_registry
from node_engine.engine.registry import VariantRegistry

router = APIRouter()

@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.
    Returns API status and version information.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT
    }

@router.get("/health/registry")
async def registry_health(
    registry: VariantRegistry = Depends(get_registry)
) -> Dict[str, Any]:
    """
    Check the variant registry.
    The engine can render any tree only when a fallback renderer is set.
    """
    return {
        "status": "healthy" if registry.has_fallback else "unhealthy",
        "timestamp": datetime.now().isoformat(),
        "variant_count": len(registry.registered_variants()),
        "fallback": registry.fallback_name,
    }
