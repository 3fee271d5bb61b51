"""Tests for child aggregation."""
from __future__ import annotations

import logging

import pytest

from node_engine.engine.aggregation import (
    DEFAULT_COLORS,
    AggregationConfig,
    AggregationOperation,
    aggregate_children,
    aggregate_data,
    aggregation_config_of,
)
from node_engine.engine.view_engine import ViewEngine


@pytest.fixture
def budget(make_node):
    """Expenses in two categories plus one uncategorised entry."""
    return make_node(
        "budget", "grid_card", "collection", title="Budget",
        children=[
            make_node("rent", amount=1200, category="Housing", color="#111"),
            make_node("food", amount="300.5", category="Groceries"),
            make_node("snacks", amount=49.5, category="Groceries", color="#222"),
            make_node("misc", amount="n/a"),
        ],
    )


class TestAggregateChildren:
    """Test ungrouped and grouped aggregation."""

    @pytest.mark.parametrize("operation, expected", [
        ("sum", 1550),
        ("count", 4),
        ("average", 387.5),
        ("min", 0),
        ("max", 1200),
    ])
    def test_ungrouped_operations(self, budget, operation, expected):
        data = aggregate_children(budget, AggregationConfig(target_key="amount", operation=operation))

        assert data.total == expected
        assert data.node_count == 4
        assert len(data.items) == 1
        assert data.items[0].label == "Budget"
        assert data.items[0].percentage == 100.0

    def test_grouped_sum(self, budget):
        """Test that groups are sorted by value with their share of the total."""
        data = aggregate_children(budget, AggregationConfig(target_key="amount", group_by="category"))

        assert [item.label for item in data.items] == ["Housing", "Groceries", "Other"]
        assert [item.value for item in data.items] == [1200, 350, 0]
        assert [item.count for item in data.items] == [1, 2, 1]
        assert data.total == 1550
        assert data.max == 1200
        assert data.min == 0
        assert data.items[0].percentage == pytest.approx(1200 / 1550 * 100)

    def test_group_colors(self, budget):
        """Test that the first color found in a group wins, else the palette by group order."""
        data = aggregate_children(
            budget, AggregationConfig(target_key="amount", group_by="category", color_key="color")
        )
        colors = {item.group_key: item.color for item in data.items}

        assert colors["Housing"] == "#111"
        assert colors["Groceries"] == "#222"
        assert colors["Other"] == DEFAULT_COLORS[2]

    def test_label_key(self, make_node):
        parent = make_node("p", children=[make_node("a", status="todo", status_label="To do", points=3)])
        data = aggregate_children(
            parent, AggregationConfig(target_key="points", group_by="status", label_key="status_label")
        )
        assert data.items[0].label == "To do"
        assert data.items[0].group_key == "todo"

    def test_recursive_and_predicate(self, make_node):
        inner = make_node("inner", points=1, children=[make_node("deep", points=5)])
        parent = make_node("p", children=[inner, make_node("flat", points=2)])
        config = AggregationConfig(target_key="points", recursive=True)

        assert aggregate_children(parent, config).total == 8
        assert aggregate_children(parent, AggregationConfig(target_key="points")).total == 3
        assert aggregate_children(parent, config, predicate=lambda node: node.id != "deep").total == 3

    def test_empty(self, make_node):
        data = aggregate_children(make_node("p"), AggregationConfig(target_key="amount"))

        assert data.is_empty is True
        assert data.items == []
        assert aggregate_children(None, AggregationConfig(target_key="amount")).is_empty is True

    def test_to_dict(self, budget):
        data = aggregate_children(budget, AggregationConfig(target_key="amount", operation="count")).to_dict()

        assert data["total"] == 4
        assert data["is_empty"] is False
        assert data["items"][0]["label"] == "Budget"


class TestAggregationSource:
    """Test aggregating over another node in the tree."""

    def test_source_id(self, budget, make_node):
        root = make_node("root", children=[budget, make_node("chart", "grid_card")])
        config = AggregationConfig(target_key="amount", source_id="budget")

        assert aggregate_data(root.children[1], config, root).total == 1550

    def test_missing_source_falls_back(self, budget, caplog):
        config = AggregationConfig(target_key="amount", source_id="nowhere")

        with caplog.at_level(logging.WARNING, logger="node_engine.engine.aggregation"):
            assert aggregate_data(budget, config, budget).total == 1550
        assert "nowhere" in caplog.text


class TestAggregationMetadata:
    """Test the metadata.aggregation entry and its rendering."""

    def test_config_from_metadata(self, make_node):
        config = aggregation_config_of(make_node("n", aggregation={"target_key": "amount", "operation": "max"}))
        assert config.operation is AggregationOperation.MAX

    def test_malformed_config_ignored(self, make_node):
        assert aggregation_config_of(make_node("n", aggregation={"operation": "median"})) is None
        assert aggregation_config_of(make_node("n")) is None

    def test_grid_card_summary(self, registry, make_node):
        card = make_node(
            "card", "grid_card", "collection", title="Budget",
            aggregation={"target_key": "amount", "group_by": "category"},
            children=[make_node("a", amount=5, category="X"), make_node("b", amount=3, category="Y")],
        )

        summary = ViewEngine(registry).render(card).root.element.find("summary")

        assert summary.props["total"] == 8
        assert summary.props["operation"] == "sum"
        assert [segment.text() for segment in summary.children] == ["X", "Y"]

    def test_grid_card_source_slot(self, registry, make_node):
        """Test that the source_id slot points a card at another subtree."""
        budget = make_node("budget", "view_list_stack", "collection", children=[make_node("a", amount=7)])
        card = make_node("card", "grid_card", "collection", source_id="budget", aggregation={"target_key": "amount"})
        root = make_node("root", "container_stack", "space", children=[budget, card])

        summary = ViewEngine(registry).render(root).find("card").element.find("summary")

        assert summary.props["total"] == 7
