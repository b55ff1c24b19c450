"""Tests for PlantUML source-aware detection."""

import pytest
from convert2mermaid.detection.plantuml import (
    EXPLICIT_CONFIDENCE,
    PlantUMLDetector,
    detect_explicit_type,
    extract_text_metadata,
)
from convert2mermaid.detection.types import DiagramType


@pytest.fixture
def detector():
    return PlantUMLDetector()


@pytest.mark.parametrize(
    "file_name,expected",
    [
        ("sample-sequence.puml", DiagramType.SEQUENCE),
        ("sample-flowchart.puml", DiagramType.FLOWCHART),
        ("sample-state.puml", DiagramType.STATE),
        ("sample-entity.puml", DiagramType.ENTITY_RELATIONSHIP),
        ("sample-network.puml", DiagramType.NETWORK),
    ],
)
def test_sample_diagrams(detector, data_dir, file_name, expected):
    analysis = detector.analyze_raw((data_dir / file_name).read_bytes())
    assert analysis.detected_type == expected
    assert analysis.confidence >= 70


class TestExplicitDirectives:
    def test_state_declaration(self, detector):
        analysis = detector.analyze_text("@startuml\nstate Idle\nIdle --> Running : start\n@enduml")
        assert analysis.detected_type == DiagramType.STATE
        assert analysis.confidence == EXPLICIT_CONFIDENCE
        assert len(analysis.patterns) == 1
        assert len(analysis.patterns[0].evidence) == 1

    @pytest.mark.parametrize(
        "content,expected",
        [
            ("@startmindmap\n* Root\n** Branch\n@endmindmap", DiagramType.MINDMAP),
            ("@startgantt\n[Design] lasts 5 days\n@endgantt", DiagramType.GANTT),
            ("@startuml\nclass User\n@enduml", DiagramType.CLASS),
            ("@startuml\ncomponent Billing\n@enduml", DiagramType.COMPONENT),
            ("@startuml\n!define SEQUENCE\nAlice -> Bob\n@enduml", DiagramType.SEQUENCE),
        ],
    )
    def test_directives(self, detector, content, expected):
        analysis = detector.analyze_text(content)
        assert analysis.detected_type == expected
        assert analysis.confidence == EXPLICIT_CONFIDENCE

    def test_keyword_must_start_line(self):
        assert detect_explicit_type(["note: this state is fine"]) is None

    def test_first_declaration_wins(self):
        pattern = detect_explicit_type(["class User", "state Idle"])
        assert pattern.type == DiagramType.CLASS


class TestPlantUMLDetector:
    def test_sequence_beats_flowchart(self, detector, data_dir):
        analysis = detector.analyze_raw((data_dir / "sample-sequence.puml").read_bytes())
        assert analysis.confidence == 100
        types = [pattern.type for pattern in analysis.patterns]
        assert DiagramType.FLOWCHART not in types

    def test_flowchart_evidence(self, detector, data_dir):
        analysis = detector.analyze_raw((data_dir / "sample-flowchart.puml").read_bytes())
        assert analysis.confidence == 75
        assert "Found decision points" in analysis.patterns[-1].evidence

    def test_no_signals(self, detector):
        analysis = detector.analyze_raw(b"not a real diagram")
        assert analysis.detected_type == DiagramType.UNKNOWN
        assert analysis.confidence == 0
        assert analysis.patterns == ()

    def test_undecodable_bytes(self, detector):
        analysis = detector.analyze_raw(b"\xff\xfe\xfa\xfb")
        assert analysis.detected_type == DiagramType.UNKNOWN
        assert analysis.confidence == 0

    def test_configured_encoding(self):
        content = "@startuml\nstate Prêt\n@enduml".encode("latin-1")
        analysis = PlantUMLDetector(encoding="latin-1").analyze_raw(content)
        assert analysis.detected_type == DiagramType.STATE


class TestTextMetadata:
    def test_counts(self, data_dir):
        content = (data_dir / "sample-sequence.puml").read_text(encoding="utf-8")
        metadata = extract_text_metadata(content)
        assert metadata.shape_types == ("plantuml",)
        assert metadata.total_edges > 0
        assert metadata.has_directional_flow is True
        assert metadata.has_temporal is True
        assert metadata.has_specialized_shapes is True

    def test_network_elements(self, data_dir):
        content = (data_dir / "sample-network.puml").read_text(encoding="utf-8")
        assert extract_text_metadata(content).has_network_elements is True
