"""Event handlers for domain events."""
from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Optional

from node_engine.domain.events import (
    BehaviorTriggered,
    DomainEventPublisher,
    NavigationChanged,
    VariantOverwritten,
    VariantResolutionDegraded,
    event_publisher,
)

logger = logging.getLogger(__name__)


class AuditLogHandler:
    """Logs all domain events for audit trail."""

    def handle_variant_resolution_degraded(self, event: VariantResolutionDegraded) -> None:
        logger.info(
            f"[AUDIT] Node {event.aggregate_id} variant '{event.variant}' rendered as "
            f"'{event.resolved_variant}' ({event.source})"
        )

    def handle_variant_overwritten(self, event: VariantOverwritten) -> None:
        logger.info(f"[AUDIT] Variant overwritten: {event.variant}")

    def handle_behavior_triggered(self, event: BehaviorTriggered) -> None:
        logger.info(f"[AUDIT] Behavior '{event.action}' triggered on node {event.node_id}")

    def handle_navigation_changed(self, event: NavigationChanged) -> None:
        logger.info(f"[AUDIT] Shell {event.aggregate_id} navigated to {event.target_node_id}")


class DegradedVariantTracker:
    """Counts degraded resolutions per unknown variant so bad data can be found."""

    def __init__(self) -> None:
        self._counts: Counter = Counter()

    def handle_variant_resolution_degraded(self, event: VariantResolutionDegraded) -> None:
        self._counts[event.variant] += 1
        if event.source == "fallback":
            logger.warning(f"[DEGRADED] Variant '{event.variant}' has no renderer and no type default")

    def counts(self) -> Dict[str, int]:
        return dict(self._counts)

    def reset(self) -> None:
        self._counts.clear()


degraded_variant_tracker = DegradedVariantTracker()


def register_event_handlers(publisher: Optional[DomainEventPublisher] = None) -> None:
    """Register all event handlers with the publisher."""
    publisher = publisher or event_publisher

    audit = AuditLogHandler()

    # Audit handlers (all events)
    publisher.subscribe(VariantResolutionDegraded, audit.handle_variant_resolution_degraded)
    publisher.subscribe(VariantOverwritten, audit.handle_variant_overwritten)
    publisher.subscribe(BehaviorTriggered, audit.handle_behavior_triggered)
    publisher.subscribe(NavigationChanged, audit.handle_navigation_changed)

    # Degraded variant tracking
    publisher.subscribe(VariantResolutionDegraded, degraded_variant_tracker.handle_variant_resolution_degraded)
