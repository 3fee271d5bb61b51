"""Internal domain entities as TypedDicts for type safety at boundaries."""
from __future__ import annotations

from typing import Any, Dict, TypedDict


class ResourceEntity(TypedDict):
    """Persisted record shape the mutation layer works with (system of record)."""
    id: str
    user_id: str
    household_id: str | None
    parent_id: str | None
    path: str
    type: str
    title: str
    description: str | None
    status: str
    meta_data: Dict[str, Any]
    is_schedulable: bool
    scheduled_at: str | None
    created_at: str
    updated_at: str
    deleted_at: str | None
    created_by: str | None
    pointer_table: str | None
    pointer_id: str | None
    duration_minutes: int


class FieldError(TypedDict):
    path: str
    message: str
