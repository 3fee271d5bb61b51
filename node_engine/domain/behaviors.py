"""Declarative behavior configs: data-described interaction intents.

A node declares ``metadata.behavior = {"action": ..., "target": ..., "payload": ...}``
and the renderer hands it to the dispatcher instead of hardcoding a mutation.
Known actions are parsed into closed variants with validated payloads; any
other action string is kept as a CustomBehavior so newer data keeps working.
"""
from __future__ import annotations

from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from node_engine.domain.errors import ValidationError


class _Behavior(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    def to_config(self) -> Dict[str, Any]:
        """Wire shape ``{action, target?, payload?}``."""
        return self.model_dump(mode="json", exclude_none=True)


class UpdateFieldBehavior(_Behavior):
    """Write ``payload`` into ``metadata[target]``."""
    action: Literal["update_field"] = "update_field"
    target: str = Field(..., min_length=1, description="Metadata key to update")
    payload: Any = None


class ToggleStatusBehavior(_Behavior):
    """Advance the node's status along the status cycle."""
    action: Literal["toggle_status"] = "toggle_status"


class MovePayload(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    parent_id: str = Field(..., min_length=1)


class MoveNodeBehavior(_Behavior):
    """Re-parent the node under ``payload.parent_id``."""
    action: Literal["move_node"] = "move_node"
    payload: MovePayload


class LogEventBehavior(_Behavior):
    """Append an event item beneath the node."""
    action: Literal["log_event"] = "log_event"
    payload: Dict[str, Any] = Field(default_factory=dict)


class CustomBehavior(_Behavior):
    action: str = Field(..., min_length=1)
    target: Optional[str] = None
    payload: Any = None


BehaviorConfig = Union[
    UpdateFieldBehavior,
    ToggleStatusBehavior,
    MoveNodeBehavior,
    LogEventBehavior,
    CustomBehavior,
]


class BehaviorFactory:
    """Selects the behavior variant for an action name."""

    _behaviors = {
        "update_field": UpdateFieldBehavior,
        "toggle_status": ToggleStatusBehavior,
        "move_node": MoveNodeBehavior,
        "log_event": LogEventBehavior,
    }

    @classmethod
    def get_behavior_class(cls, action: str) -> type:
        return cls._behaviors.get(action, CustomBehavior)


def parse_behavior(data: Any) -> BehaviorConfig:
    """Parse a ``{action, target?, payload?}`` mapping into its behavior variant."""
    if isinstance(data, _Behavior):
        return data
    if not isinstance(data, dict):
        raise ValidationError("Behavior config must be an object")
    action = data.get("action")
    if not isinstance(action, str) or not action:
        raise ValidationError(
            "Behavior config requires a non-empty 'action'",
            field_errors=[{"path": "action", "message": "Field required"}],
        )
    behavior_class = BehaviorFactory.get_behavior_class(action)
    try:
        return behavior_class.model_validate(data)
    except PydanticValidationError as exc:
        field_errors = [
            {"path": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        raise ValidationError(f"Invalid '{action}' behavior", field_errors=field_errors) from exc
