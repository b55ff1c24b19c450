"""
Detection primitives - Value types shared by every detector.

Detectors produce a :class:`DiagramAnalysis`; the generic detector is driven by
a table of :class:`DetectionRule` records, each made of weighted
:class:`PatternMatcher` heuristics.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, Sequence, Tuple

if TYPE_CHECKING:
    from convert2mermaid.model import Shape


class DiagramType(str, Enum):
    """Type of diagram."""

    FLOWCHART = "flowchart"
    SEQUENCE = "sequence"
    CLASS = "class"
    STATE = "state"
    COMPONENT = "component"
    ENTITY_RELATIONSHIP = "entity-relationship"
    NETWORK = "network"
    GANTT = "gantt"
    MINDMAP = "mindmap"
    TIMELINE = "timeline"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class DiagramMetadata:
    """Coarse statistics of a diagram."""

    total_shapes: int = 0  # Nodes only
    total_edges: int = 0
    shape_types: Tuple[str, ...] = ()
    has_specialized_shapes: bool = False
    has_directional_flow: bool = False
    has_hierarchy: bool = False
    has_temporal: bool = False
    has_data_model: bool = False
    has_network_elements: bool = False


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of a single pattern matcher."""

    matches: bool
    confidence: float = 0
    evidence: Tuple[str, ...] = ()


#: Signature of pattern matchers
Matcher = Callable[[Sequence["Shape"], DiagramMetadata], DetectionResult]


@dataclass(frozen=True)
class PatternMatcher:
    """Named, weighted heuristic.

    Weight is relative to other matchers of the same rule.
    """

    name: str
    weight: int
    matcher: Matcher


@dataclass(frozen=True)
class DetectionRule:
    """All heuristics for one diagram type."""

    type: DiagramType
    patterns: Tuple[PatternMatcher, ...]
    minimum_confidence: float


@dataclass(frozen=True)
class DetectionPattern:
    """Evidence recorded for one diagram type."""

    type: DiagramType
    evidence: Tuple[str, ...] = ()
    weight: float = 0  # Raw, not normalized
    confidence: float = 0


@dataclass(frozen=True)
class DiagramAnalysis:
    """Result of diagram type detection."""

    detected_type: DiagramType = DiagramType.UNKNOWN
    confidence: float = 0
    patterns: Tuple[DetectionPattern, ...] = ()
    metadata: DiagramMetadata = field(default_factory=DiagramMetadata)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["detected_type"] = self.detected_type.value
        data["patterns"] = [{**pattern, "type": pattern["type"].value} for pattern in data["patterns"]]
        return data


def empty_analysis() -> DiagramAnalysis:
    """Canonical result for errors, unsupported formats and empty input."""
    return DiagramAnalysis()
