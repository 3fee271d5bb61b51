"""Declarative header-action and context-menu configuration.

These shapes are persisted inside node metadata (``context_menu``,
``child_context_menu``, ``header_action``) and form the engine's wire format
for data-driven UI. Unknown keys are ignored; optional keys use the defaults
declared here.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class FormFieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    CURRENCY = "currency"
    DATE = "date"
    DATETIME = "datetime"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    MEDIA = "media"
    COLOR = "color"
    ICON = "icon"
    TOGGLE = "toggle"
    PROFILE_SELECT = "profile_select"
    NODE_REFERENCE = "node_reference"


class _Config(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class SelectOption(_Config):
    value: str
    label: str
    icon: Optional[str] = None
    color: Optional[str] = None


class ReferenceFilter(_Config):
    type: Optional[str] = None
    variant: Optional[str] = None
    parent_id: Optional[str] = None


class CreateFieldSchema(_Config):
    """One field of a dynamic create/edit form. Passed through untouched."""
    key: str = Field(..., min_length=1)
    label: str
    type: FormFieldType
    required: bool = False
    default_value: Any = None
    placeholder: Optional[str] = None
    help_text: Optional[str] = None
    options: Optional[List[SelectOption]] = None
    accept: Optional[str] = None
    max_size_mb: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    currency_code: Optional[str] = None
    reference_filter: Optional[ReferenceFilter] = None
    icon_set: Optional[List[str]] = None
    color_palette: Optional[List[str]] = None


class ShowIfOperator(str, Enum):
    EQ = "eq"
    NEQ = "neq"
    EXISTS = "exists"
    NOT_EXISTS = "not_exists"


class ShowIf(_Config):
    """Visibility condition evaluated against ``node.metadata[key]``.

    ``operator`` stays a plain string so an unknown operator still parses
    (and is treated as visible) instead of hiding the whole menu.
    """
    key: str
    value: Any = None
    operator: str = ShowIfOperator.EQ.value


class ContextMenuOption(_Config):
    id: str
    label: str
    action_type: str = Field(..., description="edit | delete | move | move_to_column | navigate | custom")
    icon: Optional[str] = None
    color: Optional[str] = None
    divider_before: bool = False
    edit_schema: Optional[List[CreateFieldSchema]] = None
    edit_fields: Optional[List[str]] = None
    move_targets: Optional[Union[List[str], Literal["siblings"]]] = None
    target_id: Optional[str] = None
    custom_handler: Optional[str] = None
    custom_payload: Optional[Dict[str, Any]] = None
    show_if: Optional[ShowIf] = None


class ContextMenuConfig(_Config):
    options: List[ContextMenuOption] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.options


class ActionOption(_Config):
    """One entry in the header action dropdown."""
    id: str
    label: str
    action_type: Literal["create", "navigate", "custom"]
    icon: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    create_schema: Optional[List[CreateFieldSchema]] = None
    create_variant: Optional[str] = None
    create_node_type: Literal["container", "collection", "item"] = "item"
    target_id: Optional[str] = None
    custom_handler: Optional[str] = None
    custom_payload: Optional[Dict[str, Any]] = None


class HeaderActionConfig(_Config):
    label: str = "Add"
    icon: str = "Plus"
    options: List[ActionOption] = Field(default_factory=list)


class CreateOption(_Config):
    """Legacy ``create_options`` entry published by directory views."""
    label: str
    type: Literal["folder", "task"]
    icon: Optional[str] = None
    variant: Optional[str] = None

