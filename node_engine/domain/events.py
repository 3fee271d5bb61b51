"""Domain events for decoupled side effects and integrations."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List
from uuid import uuid4

logger = logging.getLogger(__name__)


@dataclass
class DomainEvent:
    """Base class for all domain events."""
    event_id: str
    timestamp: datetime
    aggregate_id: str

    def __post_init__(self):
        if not hasattr(self, 'event_id') or not self.event_id:
            object.__setattr__(self, 'event_id', str(uuid4()))
        if not hasattr(self, 'timestamp') or not self.timestamp:
            object.__setattr__(self, 'timestamp', datetime.now())


@dataclass
class VariantResolutionDegraded(DomainEvent):
    """Raised when a node is rendered through its type default or the fallback."""
    variant: str
    node_type: str
    resolved_variant: str
    source: str


@dataclass
class VariantOverwritten(DomainEvent):
    """Raised when a registered variant is replaced by a new renderer."""
    variant: str


@dataclass
class BehaviorTriggered(DomainEvent):
    """Raised once per delivered behavior intent."""
    node_id: str
    action: str
    config: Dict[str, Any]


@dataclass
class NavigationChanged(DomainEvent):
    """Raised when the shell's target node changes."""
    target_node_id: str | None
    target_path: List[str]


class DomainEventPublisher:
    """Publisher for domain events. Instances are independent; the module
    keeps one default instance for application wiring."""

    def __init__(self) -> None:
        self._subscribers: Dict[type, List[Callable[[DomainEvent], None]]] = {}

    def subscribe(self, event_type: type[DomainEvent], handler: Callable[[DomainEvent], None]) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        self._subscribers[event_type].append(handler)

    def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribers."""
        event_type = type(event)
        if event_type in self._subscribers:
            for handler in list(self._subscribers[event_type]):
                try:
                    handler(event)
                except Exception:
                    # Observers never break the operation that raised the event
                    logger.exception(f"Event handler error for {event_type.__name__}")

    def clear_subscribers(self) -> None:
        """Clear all subscribers (useful for testing)."""
        self._subscribers = {}


event_publisher = DomainEventPublisher()
