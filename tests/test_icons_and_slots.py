"""Tests for icon lookup and slot resolution."""
from __future__ import annotations

from datetime import date, timedelta

import pytest

from node_engine.domain.errors import RenderContextError
from node_engine.engine.icons import IconName, parse_icon_spec, resolve_icon
from node_engine.engine.slots import format_slot_value, slot_value, use_slot


class TestIcons:
    """Test icon name resolution."""

    @pytest.mark.parametrize("name, expected", [
        ("Plus", IconName.PLUS),
        ("plus", IconName.PLUS),
        ("folder-plus", IconName.FOLDER_PLUS),
        ("FolderPlus", IconName.FOLDER_PLUS),
        ("check-circle", IconName.CHECK_CIRCLE),
        ("trash", IconName.TRASH),
        ("Trash2", IconName.TRASH),
    ])
    def test_known_names(self, name, expected):
        assert resolve_icon(name) is expected

    def test_unknown_name_uses_fallback(self):
        assert resolve_icon("rocket-ship") is IconName.LAYOUT_GRID
        assert resolve_icon(None, IconName.FOLDER) is IconName.FOLDER
        assert resolve_icon("", IconName.CIRCLE) is IconName.CIRCLE

    def test_parse_icon_spec(self):
        """Test the icon:<name>:<color> format used by app launchers."""
        assert parse_icon_spec("icon:check-circle:#22d3ee") == (IconName.CHECK_CIRCLE, "#22d3ee")
        assert parse_icon_spec("icon:home") == (IconName.HOME, None)
        assert parse_icon_spec("icon:bogus") == (IconName.APP_WINDOW, None)
        assert parse_icon_spec(None) == (IconName.APP_WINDOW, None)


class TestFormatSlotValue:
    """Test display formatting of slot values."""

    def test_dates(self):
        today = date.today()

        assert format_slot_value(today.isoformat(), "date") == "Today"
        assert format_slot_value(today + timedelta(days=1), "date") == "Tomorrow"
        assert format_slot_value("2023-03-05", "date") == "Mar 5"
        assert format_slot_value("soon", "date") == "soon"

    def test_currency(self):
        assert format_slot_value(1234.5, "currency") == "$1,234.50"
        assert format_slot_value(-5, "currency") == "-$5.00"
        assert format_slot_value(10, "currency", currency="EUR") == "€10.00"
        assert format_slot_value("n/a", "currency") == "n/a"

    def test_number(self):
        assert format_slot_value(1234, "number") == "1,234"
        assert format_slot_value(1.5, "number") == "1.5"
        assert format_slot_value("12", "number") == "12"

    def test_boolean(self):
        assert format_slot_value(True, "boolean") == "Yes"
        assert format_slot_value(0, "boolean") == "No"

    def test_untyped_passthrough(self):
        assert format_slot_value({"a": 1}) == {"a": 1}
        assert format_slot_value(None, "date") is None


class TestSlotValue:
    """Test slot resolution order."""

    def test_default_mapping(self, make_node):
        """Test that built-in slots read title, description and color."""
        node = make_node("n1", title="Buy milk", description="2 litres", color="#fff")

        assert slot_value(node, "headline") == "Buy milk"
        assert slot_value(node, "subtext") == "2 litres"
        assert slot_value(node, "accent_color") == "#fff"
        assert slot_value(node, "media") is None

    def test_config_mapping(self, make_node):
        node = make_node("n1", name="Custom", **{"__config": {"headline": "name"}})
        assert slot_value(node, "headline") == "Custom"

    def test_config_mapping_with_type(self, make_node):
        node = make_node("n1", due="2023-03-05", **{"__config": {"badge_2": {"key": "due", "type": "date"}}})
        assert slot_value(node, "badge_2") == "Mar 5"

    def test_config_mapping_to_title(self, make_node):
        node = make_node("n1", title="Title", **{"__config": {"badge_1": "__title"}})
        assert slot_value(node, "badge_1") == "Title"

    def test_config_mapping_missing_value_falls_through(self, make_node):
        """Test that a mapped key with no value falls back to the direct key."""
        node = make_node("n1", subtext="direct", **{"__config": {"subtext": "missing"}})
        assert slot_value(node, "subtext") == "direct"

    def test_direct_metadata_key(self, make_node):
        node = make_node("n1", badge_1="High")
        assert slot_value(node, "badge_1") == "High"

    def test_default(self, make_node):
        assert slot_value(make_node("n1"), "badge_3", "none") == "none"

    def test_use_slot_outside_render(self):
        with pytest.raises(RenderContextError):
            use_slot("headline")
