"""
Test configuration and fixtures for node-engine tests.
"""
import pytest
from fastapi.testclient import TestClient

from node_engine.main import app
from node_engine.application.event_handlers import degraded_variant_tracker
from node_engine.domain.events import DomainEventPublisher, event_publisher
from node_engine.domain.node import Node
from node_engine.engine.registry import VariantRegistry
from node_engine.engine.renderers import build_default_registry
from node_engine.engine.view_engine import ViewEngine


# UUID ids so trees also pass the ingestion validator
ROOT_ID = "00000000-0000-4000-8000-000000000000"
TAB_A_ID = "00000000-0000-4000-8000-00000000000a"
TAB_B_ID = "00000000-0000-4000-8000-00000000000b"
FOLDER_ID = "00000000-0000-4000-8000-0000000000f1"
G1_ID = "00000000-0000-4000-8000-0000000000a1"
G2_ID = "00000000-0000-4000-8000-0000000000a2"
ITEM_B_ID = "00000000-0000-4000-8000-0000000000b1"


def build_node(node_id, variant="row_simple", node_type="item", title=None, children=None, **metadata):
    """Build a Node with sensible defaults for tests."""
    return Node(
        id=node_id,
        type=node_type,
        variant=variant,
        title=title or f"Node {node_id}",
        metadata=metadata,
        children=children,
    )


@pytest.fixture
def make_node():
    return build_node


@pytest.fixture(autouse=True)
def reset_global_events():
    """Keep the application publisher and trackers isolated per test."""
    yield
    event_publisher.clear_subscribers()
    degraded_variant_tracker.reset()


@pytest.fixture
def publisher():
    return DomainEventPublisher()


@pytest.fixture
def registry(publisher) -> VariantRegistry:
    return build_default_registry(publisher=publisher)


@pytest.fixture
def engine(registry) -> ViewEngine:
    return ViewEngine(registry)


@pytest.fixture
def shell_tree() -> Node:
    """Shell root with tabs A and B; tab A holds a folder with two items.

    root
    ├── tab A (view_directory)
    │   ├── folder (container_stack)
    │   │   └── g2 (row_detail_check)
    │   └── g1 (row_detail_check)
    └── tab B (view_list_stack)
        └── item B (row_simple)
    """
    g2 = build_node(G2_ID, "row_detail_check", title="Grandchild Two", status="active")
    folder = build_node(FOLDER_ID, "container_stack", "container", title="Folder", children=[g2])
    g1 = build_node(G1_ID, "row_detail_check", title="Grandchild One", status="active")
    tab_a = build_node(TAB_A_ID, "view_directory", "collection", title="Tab A", children=[folder, g1])
    item_b = build_node(ITEM_B_ID, "row_simple", title="Item B")
    tab_b = build_node(TAB_B_ID, "view_list_stack", "collection", title="Tab B", children=[item_b])
    return build_node(ROOT_ID, "layout_app_shell", "space", title="My Home", children=[tab_a, tab_b])


@pytest.fixture
def shell_tree_json(shell_tree):
    return shell_tree.to_json_dict()


@pytest.fixture
def client():
    """Create a test client running the app's startup hooks."""
    with TestClient(app) as test_client:
        yield test_client
