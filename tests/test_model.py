"""Tests for normalized diagram model."""

import json
from convert2mermaid.detection.types import DiagramAnalysis, DiagramType
from convert2mermaid.model import Diagram, Shape


class TestShape:
    def test_pascal_case_fields(self):
        shape = Shape.model_validate(
            {
                "Id": "7",
                "ShapeType": "Dynamic connector",
                "Label": "calls",
                "IsEdge": True,
                "FromNode": "1",
                "ToNode": "2",
                "Style": {"EndArrow": 13, "LinePattern": 2, "Rounding": 0.1},
            }
        )
        assert shape.is_edge is True
        assert shape.from_node == "1"
        assert shape.style.end_arrow == 13
        assert shape.style.line_pattern == 2

    def test_field_names(self):
        shape = Shape(id="1", shape_type="router", label="Core")
        assert shape.style.line_weight == 1
        assert shape.style.end_arrow == 0
        assert shape.is_edge is False
        assert shape.from_node == ""

    def test_dump_by_alias(self):
        data = Shape(id="1", shape_type="router").model_dump(by_alias=True)
        assert data["ShapeType"] == "router"
        assert data["Style"]["EndArrow"] == 0


class TestDiagram:
    def test_rendering_type_defaults_to_flowchart(self):
        assert Diagram().rendering_type == DiagramType.FLOWCHART
        assert Diagram(analysis=DiagramAnalysis()).rendering_type == DiagramType.FLOWCHART

    def test_rendering_type_follows_analysis(self):
        diagram = Diagram(analysis=DiagramAnalysis(detected_type=DiagramType.SEQUENCE, confidence=83))
        assert diagram.rendering_type == DiagramType.SEQUENCE

    def test_load_shapes_json(self, data_dir):
        with open(data_dir / "network_shapes.json", encoding="UTF-8") as file:
            diagram = Diagram.model_validate(json.load(file))
        assert len(diagram.shapes) == 5
        assert diagram.shapes[4].is_edge is True
        assert diagram.shapes[4].style.end_arrow == 1
