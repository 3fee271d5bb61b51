"""Slots: named display values a renderer reads from node metadata.

A slot is resolved in order from the node's ``__config`` mapping
(``{"headline": "name"}`` or ``{"badge_2": {"key": "due", "type": "date"}}``),
then a metadata key of the same name, then a built-in default mapping. The
key ``__title`` stands for ``node.title``.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Optional

from node_engine.domain.node import Node
from node_engine.engine.context import use_node

SLOT_CONFIG_KEY = "__config"
TITLE_KEY = "__title"

DEFAULT_SLOT_MAPPINGS = {
    "headline": TITLE_KEY,
    "subtext": "description",
    "accent_color": "color",
    "icon_start": "icon",
    "media": "imageUrl",
}

_CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "JPY": "¥"}


def _format_date(value: Any, today: Optional[date] = None) -> str:
    if isinstance(value, datetime):
        parsed = value.date()
    elif isinstance(value, date):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return value
    else:
        return str(value)

    today = today or date.today()
    if parsed == today:
        return "Today"
    if parsed == today + timedelta(days=1):
        return "Tomorrow"
    return f"{parsed:%b} {parsed.day}"


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _format_number(value: Any) -> str:
    number = _as_number(value)
    if number is None:
        return str(value)
    if isinstance(number, int) or float(number).is_integer():
        return f"{int(number):,}"
    return f"{number:,.3f}".rstrip("0").rstrip(".")


def _format_currency(value: Any, currency: str = "USD") -> str:
    number = _as_number(value)
    if number is None:
        return str(value)
    symbol = _CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    sign = "-" if number < 0 else ""
    return f"{sign}{symbol}{abs(number):,.2f}"


def format_slot_value(value: Any, field_type: Optional[str] = None, currency: str = "USD") -> Any:
    """Format ``value`` for display according to its field type; untyped values pass through."""
    if value is None:
        return None
    if field_type == "date":
        return _format_date(value)
    if field_type == "currency":
        return _format_currency(value, currency)
    if field_type == "number":
        return _format_number(value)
    if field_type == "boolean":
        return "Yes" if value else "No"
    return value


def _read(node: Node, key: str) -> Any:
    return node.title if key == TITLE_KEY else node.metadata.get(key)


def slot_value(
    node: Node,
    slot_name: str,
    default: Any = None,
    field_type: Optional[str] = None,
    currency: str = "USD",
) -> Any:
    metadata = node.metadata
    config = metadata.get(SLOT_CONFIG_KEY)

    if isinstance(config, dict) and slot_name in config:
        mapping = config[slot_name]
        if isinstance(mapping, str):
            key, mapped_type = mapping, field_type
        elif isinstance(mapping, dict) and isinstance(mapping.get("key"), str):
            key, mapped_type = mapping["key"], mapping.get("type") or field_type
        else:
            key, mapped_type = None, field_type
        if key is not None:
            value = _read(node, key)
            if value is not None:
                return format_slot_value(value, mapped_type, currency)

    if slot_name in metadata:
        return format_slot_value(metadata[slot_name], field_type, currency)

    default_key = DEFAULT_SLOT_MAPPINGS.get(slot_name)
    if default_key:
        value = _read(node, default_key)
        if value is not None:
            return format_slot_value(value, field_type, currency)

    return default


def use_slot(slot_name: str, default: Any = None, field_type: Optional[str] = None, currency: str = "USD") -> Any:
    """Slot value for the node currently being rendered."""
    return slot_value(use_node().node, slot_name, default, field_type, currency)
