"""Diagram type detection."""

from convert2mermaid.detection.types import (
    DetectionPattern,
    DetectionResult,
    DetectionRule,
    DiagramAnalysis,
    DiagramMetadata,
    DiagramType,
    PatternMatcher,
    empty_analysis,
)
from convert2mermaid.detection.metadata import extract_metadata
from convert2mermaid.detection.detector import DiagramDetector
from convert2mermaid.detection.drawio import DrawIODetector
from convert2mermaid.detection.plantuml import PlantUMLDetector
from convert2mermaid.detection.factory import analyze_file, analyze_shapes, get_detector

__all__ = [
    "DetectionPattern",
    "DetectionResult",
    "DetectionRule",
    "DiagramAnalysis",
    "DiagramMetadata",
    "DiagramType",
    "PatternMatcher",
    "empty_analysis",
    "extract_metadata",
    "DiagramDetector",
    "DrawIODetector",
    "PlantUMLDetector",
    "analyze_file",
    "analyze_shapes",
    "get_detector",
]
