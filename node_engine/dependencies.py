from __future__ import annotations

from functools import lru_cache

from node_engine.config import settings
from node_engine.domain.events import event_publisher
from node_engine.engine.registry import VariantRegistry
from node_engine.engine.renderers import build_default_registry
from node_engine.application.render_service import RenderService
from node_engine.application.tree_validation_service import TreeValidationService
from node_engine.infrastructure.recording_mutation_port import RecordingMutationPort


@lru_cache
def get_registry() -> VariantRegistry:
    registry = build_default_registry(settings, publisher=event_publisher)
    registry.assert_configured()
    return registry


def get_tree_validation_service() -> TreeValidationService:
    return TreeValidationService(require_uuid=settings.REQUIRE_UUID_IDS)


def get_render_service() -> RenderService:
    return RenderService(
        registry=get_registry(),
        validator=get_tree_validation_service(),
        publisher=event_publisher,
        memoize=settings.MEMOIZE_RENDERS,
        cache_size=settings.RENDER_CACHE_SIZE,
        shell_back_priority=settings.SHELL_BACK_PRIORITY,
    )


def get_mutation_port() -> RecordingMutationPort:
    return RecordingMutationPort(status_cycle=settings.STATUS_CYCLE)
