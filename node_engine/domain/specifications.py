"""Specification pattern for metadata predicates (context-menu ``show_if``)."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from node_engine.domain.menus import ShowIf, ShowIfOperator


def strict_equals(actual: Any, expected: Any) -> bool:
    """Equality that never treats a bool as equal to a number."""
    if isinstance(actual, bool) or isinstance(expected, bool):
        return isinstance(actual, bool) and isinstance(expected, bool) and actual is expected
    return actual == expected


class Specification(ABC):
    """Abstract base for specifications over a metadata mapping."""

    @abstractmethod
    def is_satisfied_by(self, candidate: Dict[str, Any]) -> bool:
        """Check if candidate satisfies this specification."""
        pass

    def not_(self) -> Specification:
        """Negate this specification."""
        return NotSpecification(self)


class NotSpecification(Specification):
    """NOT specification."""

    def __init__(self, spec: Specification):
        self.spec = spec

    def is_satisfied_by(self, candidate: Dict[str, Any]) -> bool:
        return not self.spec.is_satisfied_by(candidate)


class AlwaysSatisfied(Specification):
    """Options without a condition, or with an unknown operator."""

    def is_satisfied_by(self, candidate: Dict[str, Any]) -> bool:
        return True


class MetadataEquals(Specification):

    def __init__(self, key: str, value: Any):
        self.key = key
        self.value = value

    def is_satisfied_by(self, metadata: Dict[str, Any]) -> bool:
        return strict_equals(metadata.get(self.key), self.value)


class MetadataExists(Specification):
    """Key is present and not null."""

    def __init__(self, key: str):
        self.key = key

    def is_satisfied_by(self, metadata: Dict[str, Any]) -> bool:
        return metadata.get(self.key) is not None


def specification_for_show_if(show_if: Optional[ShowIf]) -> Specification:
    """Build the visibility specification for a ``show_if`` condition."""
    if show_if is None:
        return AlwaysSatisfied()

    operator = show_if.operator
    if operator == ShowIfOperator.EQ.value:
        return MetadataEquals(show_if.key, show_if.value)
    if operator == ShowIfOperator.NEQ.value:
        return MetadataEquals(show_if.key, show_if.value).not_()
    if operator == ShowIfOperator.EXISTS.value:
        return MetadataExists(show_if.key)
    if operator == ShowIfOperator.NOT_EXISTS.value:
        return MetadataExists(show_if.key).not_()
    # Menu visibility is cosmetic: unknown operators fail open
    return AlwaysSatisfied()
