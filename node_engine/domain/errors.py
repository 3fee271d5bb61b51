"""Domain error hierarchy for clean exception handling."""
from __future__ import annotations

from typing import List, Optional


class DomainError(Exception):
    """Base for all domain errors."""


class NotFoundError(DomainError):
    """Node or resource not found."""


class ValidationError(DomainError):
    """Invalid input or state."""

    def __init__(self, message: str, field_errors: Optional[List[dict]] = None):
        super().__init__(message)
        self.field_errors = field_errors or []


class ConflictError(DomainError):
    """Conflicting input (e.g., duplicate node id)."""


class ConfigurationError(DomainError):
    """Engine wiring is incomplete; raised at startup, never per node."""


class RenderContextError(DomainError):
    """A render-context accessor was used outside of a render pass."""
