"""
API Request/Response Schemas using Pydantic.

Structure of HTTP requests and responses for the Node Engine API.
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional, Union

# Shared
class FieldErrorSchema(BaseModel):
    path: str = Field(..., description="Dotted path of the offending field")
    message: str = Field(..., description="What is wrong with it")

# Validation schemas
class TreeValidationRequest(BaseModel):
    tree: Any = Field(..., description="Untrusted node tree JSON")
    require_uuid: Optional[bool] = Field(None, description="Override the REQUIRE_UUID_IDS setting")

class TreeValidationResponse(BaseModel):
    valid: bool = Field(..., description="Whether the tree can be rendered")
    errors: List[FieldErrorSchema] = Field(default_factory=list, description="Every problem found")
    node_count: int = Field(default=0, description="Number of nodes in a valid tree")

# Render schemas
class RenderRequest(BaseModel):
    tree: Dict[str, Any] = Field(..., description="Node tree to render")
    target_node_id: Optional[str] = Field(None, description="Shell navigation target")

class DegradedNode(BaseModel):
    node_id: str
    variant: str = Field(..., description="Variant the node asked for")
    resolved_variant: str = Field(..., description="Variant actually used")
    resolution: str = Field(..., description="type_default or fallback")

class BreadcrumbSchema(BaseModel):
    id: str
    title: str
    path_index: int
    is_root: bool = False

class NavigationState(BaseModel):
    target_node_id: Optional[str] = Field(None, description="Current navigation target")
    target_path: List[str] = Field(..., description="Ids from the root to the target")
    active_tab_id: Optional[str] = Field(None, description="Tab containing the target")
    is_deep_view: bool
    is_at_tab_root: bool
    show_back_button: bool
    display_title: str
    viewport_node_id: Optional[str] = Field(None, description="Node shown in the viewport")
    viewport_variant: Optional[str] = Field(None, description="Variant the viewport node renders with")
    breadcrumbs: List[BreadcrumbSchema] = Field(default_factory=list)

class RenderResponse(BaseModel):
    root_id: str
    node_count: int = Field(..., description="Number of rendered nodes")
    degraded: List[DegradedNode] = Field(default_factory=list, description="Nodes rendered through a fallback")
    navigation: NavigationState
    root: Dict[str, Any] = Field(..., description="Serialized render output")

# Navigation schemas
class NavigationOperationSchema(BaseModel):
    op: Literal["navigate", "back", "level", "tab", "reset"] = Field(..., description="Operation to apply")
    value: Optional[Union[int, str]] = Field(None, description="Node id, tab id or breadcrumb level")

class NavigationRequest(BaseModel):
    tree: Dict[str, Any] = Field(..., description="Shell node tree")
    target_node_id: Optional[str] = Field(None, description="Starting target")
    operations: List[NavigationOperationSchema] = Field(default_factory=list)

class NavigationResponse(BaseModel):
    state: NavigationState
    results: List[bool] = Field(default_factory=list, description="Whether each operation changed state")

# Context menu schemas
class ContextMenuRequest(BaseModel):
    tree: Dict[str, Any] = Field(..., description="Node tree containing the node")
    node_id: str = Field(..., description="Node the menu is opened on")

class ContextMenuResponse(BaseModel):
    node_id: str
    suppressed: bool = Field(..., description="True when no option is visible")
    options: List[Dict[str, Any]] = Field(default_factory=list, description="Visible options in order")

# Behavior schemas
class BehaviorRequest(BaseModel):
    tree: Dict[str, Any] = Field(..., description="Node tree containing the node")
    node_id: str = Field(..., description="Node the behavior runs on")
    behavior: Optional[Dict[str, Any]] = Field(None, description="Behavior to run instead of the node's own")

class BehaviorResponse(BaseModel):
    node_id: str
    behavior: Optional[Dict[str, Any]] = Field(None, description="Behavior delivered; null for status cycling")
    mutations: List[Dict[str, Any]] = Field(default_factory=list, description="Mutation intents recorded")

# Resource schemas
class ResourceTreeRequest(BaseModel):
    resources: List[Dict[str, Any]] = Field(..., description="Flat resource rows")
    root_id: str = Field(..., description="Id of the root resource")

class ResourceTreeResponse(BaseModel):
    tree: Optional[Dict[str, Any]] = Field(None, description="Node tree, null when the root is missing")
    node_count: int = 0

# Registry schemas
class VariantsResponse(BaseModel):
    variants: List[str] = Field(..., description="Registered variant names")
    type_defaults: Dict[str, str] = Field(..., description="Node type -> default variant")
    fallback: Optional[str] = Field(None, description="Fallback renderer name")
    degraded_counts: Dict[str, int] = Field(default_factory=dict, description="Degraded resolutions per variant")
