"""
Shape based diagram type detection.

Works on the normalized shape list, so it can be used after any ingestion
parser. Each rule is scored independently as a weighted average of the
confidences of its matching patterns; the best rule above its own floor wins.
"""

import logging
from typing import TYPE_CHECKING, List, Sequence
from convert2mermaid.detection.metadata import extract_metadata
from convert2mermaid.detection.rules import DEFAULT_RULES
from convert2mermaid.detection.types import (
    DetectionPattern,
    DetectionResult,
    DetectionRule,
    DiagramAnalysis,
    DiagramMetadata,
    DiagramType,
    PatternMatcher,
)

if TYPE_CHECKING:
    from convert2mermaid.model import Shape

log = logging.getLogger(__name__)


def run_matcher(pattern: PatternMatcher, shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    """Run single matcher, partial shapes count as no evidence."""
    try:
        result = pattern.matcher(shapes, metadata)
    except (AttributeError, KeyError, TypeError, ValueError, IndexError) as error:
        log.debug("Pattern %s failed on incomplete shapes: %s", pattern.name, error)
        return DetectionResult(matches=False)
    if not result.matches:
        return result
    return DetectionResult(
        matches=True,
        confidence=min(100, max(0, result.confidence)),
        evidence=tuple(result.evidence),
    )


def evaluate_rule(rule: DetectionRule, shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionPattern:
    """
    Score a rule as weighted average of its matching patterns.

    Confidence below the rule floor is reported as 0. Weight of the result is
    the sum of weights of matching patterns.

    :param rule: rule to evaluate
    :param shapes: shapes of the diagram
    :param metadata: metadata of the same shapes
    :return: pattern with rule evidence
    """
    total_weight = 0
    total_score = 0.0
    evidence: List[str] = []

    for pattern in rule.patterns:
        result = run_matcher(pattern, shapes, metadata)
        if result.matches:
            total_score += result.confidence * pattern.weight
            total_weight += pattern.weight
            evidence.extend(result.evidence)

    confidence = total_score / total_weight if total_weight > 0 else 0
    if confidence < rule.minimum_confidence:
        if total_weight > 0:
            log.debug(
                "Rule %s below floor (%.1f < %s)", rule.type.value, confidence, rule.minimum_confidence
            )
        confidence = 0

    return DetectionPattern(type=rule.type, evidence=tuple(evidence), weight=total_weight, confidence=confidence)


class DiagramDetector:
    """Generic detector driven by a rule table."""

    def __init__(self, rules: Sequence[DetectionRule] = DEFAULT_RULES):
        self.rules = tuple(rules)

    def analyze(self, shapes: Sequence["Shape"]) -> DiagramAnalysis:
        metadata = extract_metadata(shapes)
        patterns: List[DetectionPattern] = []
        best_type = DiagramType.UNKNOWN
        best_confidence = 0.0

        for rule in self.rules:
            result = evaluate_rule(rule, shapes, metadata)
            # Rules below their floor stay visible, rules with no evidence don't
            if result.weight > 0:
                patterns.append(result)
            # Strict comparison, earlier rules win ties
            if result.confidence > best_confidence:
                best_type = rule.type
                best_confidence = result.confidence

        log.debug("Detected %s with confidence %.1f", best_type.value, best_confidence)
        return DiagramAnalysis(
            detected_type=best_type,
            confidence=best_confidence,
            patterns=tuple(patterns),
            metadata=metadata,
        )
