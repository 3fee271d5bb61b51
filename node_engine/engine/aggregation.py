"""Child aggregation: summaries computed from the metadata of a node's children.

Dashboard cards and progress views read totals, per-group values and
percentages from here instead of walking the tree themselves.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from node_engine.domain.node import Node, find_node_by_id
from node_engine.engine.context import use_node
from node_engine.engine.slots import use_slot

logger = logging.getLogger(__name__)

AGGREGATION_KEY = "aggregation"
OTHER_GROUP = "Other"

DEFAULT_COLORS = (
    "#06b6d4",
    "#ec4899",
    "#a855f7",
    "#22c55e",
    "#eab308",
    "#f97316",
    "#3b82f6",
    "#ef4444",
)

NodePredicate = Callable[[Node], bool]


class AggregationOperation(str, Enum):
    SUM = "sum"
    COUNT = "count"
    AVERAGE = "average"
    MIN = "min"
    MAX = "max"


class AggregationConfig(BaseModel):
    """Declarative aggregation, as stored under ``metadata.aggregation``."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    target_key: str = Field(..., min_length=1, description="Metadata key holding the value")
    group_by: Optional[str] = None
    operation: AggregationOperation = AggregationOperation.SUM
    label_key: Optional[str] = None
    color_key: Optional[str] = None
    recursive: bool = False
    source_id: Optional[str] = None


@dataclass
class AggregatedItem:
    label: str
    value: float
    count: int
    color: Optional[str] = None
    group_key: Optional[str] = None
    percentage: float = 0.0


@dataclass
class AggregatedData:
    total: float = 0
    items: List[AggregatedItem] = field(default_factory=list)
    max: float = 0
    min: float = 0
    average: float = 0
    node_count: int = 0

    @property
    def is_empty(self) -> bool:
        return self.node_count == 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["is_empty"] = self.is_empty
        return data


def _number(node: Node, key: str) -> float:
    value = node.metadata.get(key)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0
    return 0


def _text(node: Node, key: str) -> str:
    value = node.metadata.get(key)
    return "" if value is None else str(value)


def collect_children(node: Node, recursive: bool = False, predicate: Optional[NodePredicate] = None) -> List[Node]:
    """Children in array order; with ``recursive`` each child is followed by its own descendants."""
    collected: List[Node] = []
    for child in node.child_nodes:
        if predicate is None or predicate(child):
            collected.append(child)
        if recursive and child.has_children:
            collected.extend(collect_children(child, True, predicate))
    return collected


def apply_operation(values: List[float], operation: AggregationOperation) -> float:
    if not values:
        return 0
    if operation is AggregationOperation.COUNT:
        return len(values)
    if operation is AggregationOperation.AVERAGE:
        return sum(values) / len(values)
    if operation is AggregationOperation.MIN:
        return min(values)
    if operation is AggregationOperation.MAX:
        return max(values)
    return sum(values)


def aggregate_children(
    node: Optional[Node],
    config: AggregationConfig,
    predicate: Optional[NodePredicate] = None,
) -> AggregatedData:
    """Aggregate ``config.target_key`` over the children of ``node``.

    Without ``group_by`` there is one item labelled with the node title. With
    it there is one item per group value (missing values group as "Other"),
    sorted by value descending, each with its share of the total.
    """
    if node is None:
        return AggregatedData()
    children = collect_children(node, config.recursive, predicate)
    if not children:
        return AggregatedData()

    if not config.group_by:
        total = apply_operation([_number(child, config.target_key) for child in children], config.operation)
        item = AggregatedItem(
            label=node.title or "Total",
            value=total,
            count=len(children),
            color=DEFAULT_COLORS[0],
            percentage=100.0,
        )
        return AggregatedData(total=total, items=[item], max=total, min=total, average=total, node_count=len(children))

    groups: Dict[str, Dict[str, Any]] = {}
    for child in children:
        group_key = _text(child, config.group_by) or OTHER_GROUP
        group = groups.setdefault(group_key, {"values": [], "nodes": [], "color": None})
        group["values"].append(_number(child, config.target_key))
        group["nodes"].append(child)
        if config.color_key and not group["color"]:
            group["color"] = _text(child, config.color_key) or None

    items: List[AggregatedItem] = []
    for index, (group_key, group) in enumerate(groups.items()):
        label = group_key
        if config.label_key:
            label = _text(group["nodes"][0], config.label_key) or group_key
        items.append(
            AggregatedItem(
                label=label,
                value=apply_operation(group["values"], config.operation),
                count=len(group["nodes"]),
                color=group["color"] or DEFAULT_COLORS[index % len(DEFAULT_COLORS)],
                group_key=group_key,
            )
        )
    items.sort(key=lambda item: item.value, reverse=True)

    total = sum(item.value for item in items)
    for item in items:
        item.percentage = item.value / total * 100 if total > 0 else 0.0
    values = [item.value for item in items]
    return AggregatedData(
        total=total,
        items=items,
        max=max(values),
        min=min(values),
        average=total / len(items),
        node_count=len(children),
    )


def aggregate_data(
    node: Optional[Node],
    config: AggregationConfig,
    root: Optional[Node] = None,
    predicate: Optional[NodePredicate] = None,
) -> AggregatedData:
    """Aggregate over ``config.source_id`` when it names a node in ``root``, else over ``node``."""
    target = node
    if config.source_id:
        source = find_node_by_id(root, config.source_id) if root is not None else None
        if source is not None:
            target = source
        else:
            logger.warning(f"Aggregation source {config.source_id} not found in tree, using the current node")
    return aggregate_children(target, config, predicate)


def aggregation_config_of(node: Node) -> Optional[AggregationConfig]:
    raw = node.metadata.get(AGGREGATION_KEY)
    if raw is None:
        return None
    try:
        return AggregationConfig.model_validate(raw)
    except PydanticValidationError as exc:
        logger.warning(f"Ignoring malformed metadata.{AGGREGATION_KEY} on node {node.id}: {exc.error_count()} error(s)")
        return None


def use_data_aggregation(config: AggregationConfig, predicate: Optional[NodePredicate] = None) -> AggregatedData:
    """Aggregate for the node being rendered; the ``source_id`` slot can point elsewhere."""
    context = use_node()
    if not config.source_id:
        source_id = use_slot("source_id")
        if isinstance(source_id, str) and source_id:
            config = config.model_copy(update={"source_id": source_id})
    return aggregate_data(context.node, config, context.root_node, predicate)
