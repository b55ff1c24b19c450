"""
PlantUML detector - Diagram type detection on PlantUML text.

PlantUML sources often say what they are (``@startmindmap``, ``state Idle``),
such declarations are trusted outright. Otherwise text is scored against
keyword and arrow notation of each diagram type.
"""

import logging
import re
from typing import List, Optional, Sequence, Tuple
from convert2mermaid.detection.scoring import Score, select_best
from convert2mermaid.detection.types import (
    DetectionPattern,
    DiagramAnalysis,
    DiagramMetadata,
    DiagramType,
    empty_analysis,
)
from convert2mermaid.utils import IP_ADDRESS_RE

log = logging.getLogger(__name__)

EXPLICIT_CONFIDENCE = 95

#: (type, directives anywhere in line, declaration keywords starting a line, evidence)
DIRECTIVES: Tuple[Tuple[DiagramType, Tuple[str, ...], Tuple[str, ...], str], ...] = (
    (DiagramType.SEQUENCE, ("@startsequence", "!define sequence"), (), "Found explicit sequence diagram directive"),
    (DiagramType.CLASS, ("@startclass",), ("class ",), "Found explicit class diagram directive"),
    (DiagramType.STATE, ("@startstate",), ("state ",), "Found explicit state diagram directive"),
    (DiagramType.COMPONENT, ("@startcomponent",), ("component ",), "Found explicit component diagram directive"),
    (DiagramType.GANTT, ("@startgantt",), (), "Found explicit Gantt diagram directive"),
    (DiagramType.MINDMAP, ("@startmindmap",), (), "Found explicit mindmap directive"),
)

ARROWS = ("->", "<-", "-->", "<--", "..>", "<..", "||--||", "}|--||")
ARROW_RE = re.compile("|".join(re.escape(arrow) for arrow in ARROWS))
NETWORK_DEVICE_RE = re.compile(r"router|switch|server|firewall", re.IGNORECASE)


def detect_explicit_type(lines: Sequence[str]) -> Optional[DetectionPattern]:
    """Find first line declaring diagram type.

    :param lines: stripped source lines
    :return: pattern with single evidence, None if nothing is declared
    """
    for line in lines:
        lowered = line.lower()
        for diagram_type, directives, keywords, evidence in DIRECTIVES:
            if any(d in lowered for d in directives) or lowered.startswith(keywords):
                return DetectionPattern(
                    type=diagram_type,
                    evidence=(evidence,),
                    weight=EXPLICIT_CONFIDENCE,
                    confidence=EXPLICIT_CONFIDENCE,
                )
    return None


def analyze_sequence(content: str) -> Score:
    score = Score(DiagramType.SEQUENCE)

    if "participant " in content or "actor " in content:
        score.add(35, "Found participant/actor declarations")
    if "->" in content or "<-" in content:
        score.add(30, "Found message arrows")
    if "activate " in content:
        score.add(25, "Found activation/deactivation")
    for keyword in ("note over", "note left", "note right", "alt", "else", "opt", "loop"):
        if keyword in content:
            score.add(5, f"Found sequence keyword: {keyword}")
    return score


def analyze_class(content: str) -> Score:
    score = Score(DiagramType.CLASS)

    if "class " in content or "interface " in content or "abstract " in content:
        score.add(40, "Found class/interface declarations")
    if " extends " in content or " implements " in content or " <|-- " in content:
        score.add(30, "Found inheritance/implementation relationships")
    if " -- " in content or " o-- " in content or " *-- " in content:
        score.add(25, "Found association relationships")
    if any(token in content for token in ("+", "-", "#", "()")):
        score.add(20, "Found method/attribute visibility notation")
    return score


def analyze_state(content: str) -> Score:
    score = Score(DiagramType.STATE)

    if "state " in content or "[*]" in content:
        score.add(35, "Found state declarations")
    if " --> " in content or " : " in content:
        score.add(30, "Found state transitions")
    if "state " in content and " {" in content:
        score.add(25, "Found composite states")
    for keyword in ("entry", "exit", "do"):
        if f"{keyword} /" in content:
            score.add(10, f"Found state keyword: {keyword}")
    return score


def analyze_component(content: str) -> Score:
    score = Score(DiagramType.COMPONENT)

    if "component " in content or "package " in content:
        score.add(40, "Found component/package declarations")
    if "interface " in content or "() " in content:
        score.add(30, "Found interface declarations")
    if "..>" in content or "-->" in content:
        score.add(25, "Found dependency relationships")
    if "<<" in content and ">>" in content:
        score.add(15, "Found stereotype notation")
    return score


def analyze_entity_relationship(content: str) -> Score:
    score = Score(DiagramType.ENTITY_RELATIONSHIP)

    if "entity " in content or "table " in content:
        score.add(40, "Found entity/table declarations")
    if any(token in content for token in ("||--||", "}|--||", "||--o{", "}o--||", "|o--o{")):
        score.add(35, "Found ER relationship notation")
    if any(phrase in content for phrase in ("one to one", "one to many", "many to many")):
        score.add(25, "Found cardinality notation")
    return score


def analyze_network(content: str) -> Score:
    score = Score(DiagramType.NETWORK)
    lowered = content.lower()

    for keyword in ("router", "switch", "server", "firewall", "hub", "gateway"):
        if keyword in lowered:
            score.add(15, f"Found network element: {keyword}")
    if IP_ADDRESS_RE.search(content):
        score.add(25, "Found IP addresses")
    for protocol in ("tcp", "udp", "http", "https", "ftp", "ssh"):
        if re.search(rf"\b{protocol}\b", lowered):
            score.add(10, f"Found network protocol: {protocol}")
    return score


def analyze_flowchart(content: str) -> Score:
    score = Score(DiagramType.FLOWCHART)

    if ":" in content and ";" in content:
        score.add(30, "Found activity notation")
    if "if (" in content or "while (" in content:
        score.add(25, "Found decision points")
    if re.search(r"^\s*(start|stop|end)\s*$", content, re.MULTILINE):
        score.add(20, "Found start/end points")
    if any(token in content for token in ("class ", "participant ", "state ", "component ")):
        score.penalize(20)
    return score


def extract_text_metadata(content: str) -> DiagramMetadata:
    lines = [line.strip() for line in content.splitlines() if line.strip()]
    shape_lines = [
        line for line in lines if not line.startswith(("@", "!", "'")) and not any(arrow in line for arrow in ARROWS)
    ]

    return DiagramMetadata(
        total_shapes=len(shape_lines),
        total_edges=len(ARROW_RE.findall(content)),
        shape_types=("plantuml",),
        has_specialized_shapes="class " in content or "participant " in content,
        has_directional_flow="->" in content,
        has_hierarchy="extends " in content or "implements " in content,
        has_temporal="activate " in content,
        has_data_model="entity " in content or "table " in content,
        has_network_elements=NETWORK_DEVICE_RE.search(content) is not None,
    )


class PlantUMLDetector:
    """Source-aware detector for PlantUML text."""

    scorers = (
        analyze_sequence,
        analyze_class,
        analyze_state,
        analyze_component,
        analyze_entity_relationship,
        analyze_network,
        analyze_flowchart,
    )

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def analyze_text(self, content: str) -> DiagramAnalysis:
        lines: List[str] = [line.strip() for line in content.splitlines()]
        metadata = extract_text_metadata(content)

        explicit = detect_explicit_type(lines)
        if explicit is not None:
            log.debug("Diagram type declared as %s", explicit.type.value)
            return DiagramAnalysis(
                detected_type=explicit.type,
                confidence=explicit.confidence,
                patterns=(explicit,),
                metadata=metadata,
            )

        analysis = select_best((scorer(content) for scorer in self.scorers), metadata)
        log.debug("Detected %s with confidence %s", analysis.detected_type.value, analysis.confidence)
        return analysis

    def analyze_raw(self, data: bytes | str) -> DiagramAnalysis:
        try:
            content = data.decode(self.encoding) if isinstance(data, bytes) else data
        except UnicodeDecodeError as error:
            log.warning("Can't decode PlantUML content: %s", error)
            return empty_analysis()
        return self.analyze_text(content)
