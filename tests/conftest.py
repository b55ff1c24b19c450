"""Shared pytest fixtures for diagram detection tests."""

import pytest
from pathlib import Path
from convert2mermaid.config import Configuration
from convert2mermaid.model import Shape, ShapeStyle


@pytest.fixture
def data_dir():
    """Directory with sample diagrams and configuration files."""
    return Path(__file__).parent / "data"


@pytest.fixture
def test_config():
    """Default configuration."""
    return Configuration()


@pytest.fixture
def node():
    """Factory for creating diagram nodes.

    Usage:
        node("a", "umlActor", "User", rounding=1)
    """

    def _create(id, shape_type="rectangle", label="", **style):
        return Shape(id=id, shape_type=shape_type, label=label, style=ShapeStyle(**style))

    return _create


@pytest.fixture
def edge():
    """Factory for creating connectors between nodes.

    Usage:
        edge("e1", "a", "b", label="call", end_arrow=1)
    """

    def _create(id, from_node="", to_node="", label="", shape_type="connector", **style):
        return Shape(
            id=id,
            shape_type=shape_type,
            label=label,
            style=ShapeStyle(**style),
            is_edge=True,
            from_node=from_node,
            to_node=to_node,
        )

    return _create


@pytest.fixture
def network_shapes(node, edge):
    """Two devices and a host with an IP address."""
    return [
        node("r1", "router", "Core Router"),
        node("s1", "switch", "Access Switch"),
        node("h1", "rectangle", "Web Host 10.0.0.5"),
        edge("e1", "r1", "s1"),
        edge("e2", "s1", "h1"),
    ]
