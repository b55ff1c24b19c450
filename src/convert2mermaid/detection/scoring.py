"""Additive scoring used by source-aware detectors.

Source-aware detectors look at raw markup, each signal adds points to a
candidate type together with evidence string. Points are capped at 100 when
reported, weight keeps the uncapped value.
"""

from typing import Iterable, List
from convert2mermaid.detection.types import DetectionPattern, DiagramAnalysis, DiagramMetadata, DiagramType


class Score:
    """Accumulator of points for one candidate type."""

    def __init__(self, diagram_type: DiagramType):
        self.type = diagram_type
        self.points = 0
        self.evidence: List[str] = []

    def add(self, points: int, evidence: str) -> None:
        self.points += points
        self.evidence.append(evidence)

    def penalize(self, points: int) -> None:
        """Lower score when another type is clearly present."""
        self.points = max(0, self.points - points)

    @property
    def confidence(self) -> int:
        return min(100, self.points)

    def to_pattern(self) -> DetectionPattern:
        return DetectionPattern(
            type=self.type,
            evidence=tuple(self.evidence),
            weight=self.points,
            confidence=self.confidence,
        )


def select_best(scores: Iterable[Score], metadata: DiagramMetadata) -> DiagramAnalysis:
    """Pick highest scoring candidate, first one wins ties."""
    best_type = DiagramType.UNKNOWN
    best_confidence = 0
    patterns: List[DetectionPattern] = []

    for score in scores:
        if score.confidence > best_confidence:
            best_type = score.type
            best_confidence = score.confidence
        if score.confidence > 0:
            patterns.append(score.to_pattern())

    return DiagramAnalysis(
        detected_type=best_type,
        confidence=best_confidence,
        patterns=tuple(patterns),
        metadata=metadata,
    )
