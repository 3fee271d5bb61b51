"""Service for node tree validation at the ingestion boundary."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from node_engine.domain.entities import FieldError
from node_engine.domain.errors import ValidationError
from node_engine.domain.node import UUID_PATTERN, Node


@dataclass
class TreeValidationResult:
    valid: bool
    errors: List[FieldError] = field(default_factory=list)
    node: Optional[Node] = None


def _format_loc(loc: Tuple[Any, ...]) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


class TreeValidationService:
    """Validates untrusted node trees before they reach the renderer.

    Schema errors come from the Node model; this service adds the checks a
    single node cannot make on its own: id format, unique ids across the
    tree and no node nested under its own id.
    """

    def __init__(self, require_uuid: bool = True) -> None:
        self._require_uuid = require_uuid

    def validate(self, data: Any) -> TreeValidationResult:
        if isinstance(data, Node):
            node = data
        else:
            try:
                node = Node.model_validate(data)
            except PydanticValidationError as exc:
                errors = [
                    FieldError(path=_format_loc(err["loc"]), message=err["msg"]) for err in exc.errors()
                ]
                return TreeValidationResult(valid=False, errors=errors)

        errors = self.structural_errors(node)
        return TreeValidationResult(valid=not errors, errors=errors, node=node if not errors else None)

    def parse_json(self, text: str) -> TreeValidationResult:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            return TreeValidationResult(
                valid=False, errors=[FieldError(path="", message=f"Invalid JSON: {exc.msg}")]
            )
        return self.validate(data)

    def require_valid(self, data: Any) -> Node:
        """Validated tree, or raise with every field error attached."""
        result = self.validate(data)
        if result.valid and result.node is not None:
            return result.node
        raise ValidationError(
            f"Invalid node tree: {len(result.errors)} error(s)", field_errors=list(result.errors)
        )

    def structural_errors(self, root: Node) -> List[FieldError]:
        errors: List[FieldError] = []
        seen: Dict[str, str] = {}
        # (node, path, ancestor ids)
        stack: List[Tuple[Node, str, Tuple[str, ...]]] = [(root, "", ())]

        while stack:
            node, path, ancestors = stack.pop()
            id_path = _join(path, "id")

            if self._require_uuid and not UUID_PATTERN.match(node.id):
                errors.append(FieldError(path=id_path, message=f"Invalid node ID format: {node.id}"))

            if node.id in ancestors:
                errors.append(FieldError(path=id_path, message=f"Node '{node.id}' is nested under itself"))
            elif node.id in seen:
                errors.append(
                    FieldError(
                        path=id_path,
                        message=f"Duplicate id '{node.id}' (first seen at {seen[node.id] or 'root'})",
                    )
                )
            else:
                seen[node.id] = path

            for index, relationship in enumerate(node.relationships or []):
                if self._require_uuid and not UUID_PATTERN.match(relationship.target_id):
                    errors.append(
                        FieldError(
                            path=_join(path, f"relationships[{index}].targetId"),
                            message=f"Invalid relationship target ID: {relationship.target_id}",
                        )
                    )

            children = node.children or []
            # Reversed so errors are reported in document order
            for index in reversed(range(len(children))):
                stack.append((children[index], f"{_join(path, 'children')}[{index}]", ancestors + (node.id,)))

        return errors


def validate_node_tree(data: Any, require_uuid: bool = True) -> TreeValidationResult:
    return TreeValidationService(require_uuid=require_uuid).validate(data)


def parse_node_json(text: str, require_uuid: bool = True) -> TreeValidationResult:
    return TreeValidationService(require_uuid=require_uuid).parse_json(text)
