"""
draw.io detector - Diagram type detection on raw mxGraph XML.

Style strings (``shape=umlActor``, ``endArrow=block``, ``dashed=1``) are
strong signals that get lost once cells are turned into shapes, so this
detector scores the XML text directly. Compressed pages (base64 of raw
deflate of URL encoded XML) are inflated first.
"""

import base64
import binascii
import logging
import re
import urllib.parse
import zlib
from typing import List, Optional
from xml.etree import ElementTree as ET
from convert2mermaid.detection.scoring import Score, select_best
from convert2mermaid.detection.types import DiagramAnalysis, DiagramMetadata, DiagramType, empty_analysis
from convert2mermaid.utils import IP_ADDRESS_RE

log = logging.getLogger(__name__)

CELL_RE = re.compile(r"<mxCell\b")
EDGE_RE = re.compile(r"edge=\"1\"")
STYLE_RE = re.compile(r"style=\"[^\"]*\"")
SHAPE_RE = re.compile(r"shape=([^;\"]+)")
GUARD_RE = re.compile(r"\[[^\[\]<>\"]+\]")
CLASS_DATA_TYPES = ("int", "string", "boolean", "decimal", "datetime", "void")


def style_shape(xml: str, *names: str) -> bool:
    """Check for shape given either as ``shape=name`` or as leading style token.

    draw.io writes basic shapes as first token of style (``style="rhombus;..."``)
    and stencils as ``shape=...``.
    """
    return any(re.search(rf"(?:shape=|style=\"){re.escape(name)}(?=[;\"])", xml) for name in names)


def inflate_page(payload: str) -> Optional[str]:
    """Inflate compressed diagram page, None if it is not one."""
    try:
        inflated = zlib.decompress(base64.b64decode(payload), -zlib.MAX_WBITS)
    except (binascii.Error, zlib.error):
        return None
    return urllib.parse.unquote(inflated.decode("utf-8", errors="replace"))


def analyze_sequence(xml: str) -> Score:
    score = Score(DiagramType.SEQUENCE)
    lowered = xml.lower()

    if re.search(r"shape=[\"']?umlActor", xml):
        score.add(30, "Found UML actor shapes")
    if "umlLifeline" in xml:
        score.add(35, "Found UML lifeline shapes")
    for term in ("message", "call", "return", "activate", "deactivate", "login", "validate"):
        if term in lowered:
            score.add(8, f"Found sequence terminology: {term}")
    if "chronologicallyOrdered" in xml:
        score.add(20, "Found chronological ordering")
    if "endArrow=block" in xml or "endArrow=open" in xml:
        score.add(15, "Found message arrows")
    if "dashed=1" in xml or 'dashed="1"' in xml:
        score.add(10, "Found return message patterns")
    return score


def analyze_class(xml: str) -> Score:
    score = Score(DiagramType.CLASS)
    lowered = xml.lower()

    if "shape=umlClass" in xml or "swimlane" in xml:
        score.add(40, "Found UML class shapes")
    # Class bodies are HTML labels separated by <hr>
    if "&lt;hr" in xml and "margin:0px" in xml:
        score.add(35, "Found HTML-formatted class content")
    has_separator = "|" in xml or "&vert;" in xml or "&lt;hr" in xml
    has_visibility = any(token in xml for token in ("+", "-", "#", "&plus;", "&minus;"))
    if has_separator and has_visibility:
        score.add(30, "Found class attribute/method notation")
    has_call = "()" in xml or "&lpar;" in xml or "&rpar;" in xml
    if has_call and (": " in xml or any(re.search(rf"\b{t}\b", xml) for t in ("boolean", "string", "int", "void"))):
        score.add(25, "Found method notation with types")
    type_count = sum(1 for t in CLASS_DATA_TYPES if re.search(rf"\b{t}\b", xml))
    if type_count >= 2:
        score.add(20, f"Found {type_count} data types")
    if "endArrow=" in xml and any(arrow in xml for arrow in ("triangle", "diamond", "block")):
        score.add(15, "Found UML association arrows")
    if any(token in xml for token in ("1..*", "0..1", "0..*", "*")):
        score.add(15, "Found multiplicity notation")
    for term in ("class", "interface", "abstract", "extends", "implements"):
        if term in lowered:
            score.add(5, f"Found class terminology: {term}")
    return score


def analyze_state(xml: str) -> Score:
    score = Score(DiagramType.STATE)
    lowered = xml.lower()

    if "shape=startState" in xml or "shape=endState" in xml:
        score.add(35, "Found start/end state shapes")
    if "rounded=1" in xml or "arcSize=" in xml:
        score.add(25, "Found rounded state shapes")
    if GUARD_RE.search(xml):
        score.add(30, "Found state transition notation")
    for term in ("idle", "active", "waiting", "processing", "transition"):
        if term in lowered:
            score.add(5, f"Found state terminology: {term}")
    return score


def analyze_component(xml: str) -> Score:
    score = Score(DiagramType.COMPONENT)

    if "shape=component" in xml or "shape=module" in xml:
        score.add(40, "Found component shapes")
    if style_shape(xml, "ellipse") and "interface" in xml:
        score.add(30, "Found interface ellipses")
    if (
        ("&lt;&lt;" in xml and "&gt;&gt;" in xml)
        or ("&amp;lt;&amp;lt;" in xml and "&amp;gt;&amp;gt;" in xml)
        or ("«" in xml and "»" in xml)
    ):
        score.add(20, "Found stereotype notation")
    if "dashed=1" in xml or "strokeDasharray" in xml:
        score.add(15, "Found dependency relationships")
    return score


def analyze_entity_relationship(xml: str) -> Score:
    score = Score(DiagramType.ENTITY_RELATIONSHIP)
    lowered = xml.lower()

    has_rectangles = style_shape(xml, "rectangle", "table")
    has_uml_shapes = "umlActor" in xml or "umlClass" in xml or "component" in xml
    if has_rectangles and not has_uml_shapes:
        score.add(35, "Found entity rectangles")
    if style_shape(xml, "rhombus", "diamond"):
        score.add(35, "Found relationship diamonds")
    if style_shape(xml, "ellipse") and "interface" not in xml:
        score.add(25, "Found attribute ellipses")
    if any(token in xml for token in ("1:1", "1:M", "M:N", "1:N")):
        score.add(30, "Found cardinality notation")
    for term in ("entity", "relationship", "attribute", "primary", "foreign", "key", "table"):
        if term in lowered:
            score.add(8, f"Found ER terminology: {term}")
    if "umlActor" in xml or "targetShapes=umlLifeline" in xml:
        score.penalize(30)
    return score


def analyze_network(xml: str) -> Score:
    score = Score(DiagramType.NETWORK)
    lowered = xml.lower()

    if "cisco" in lowered:
        score.add(40, "Found Cisco network shapes")
    for device in ("router", "switch", "firewall", "server", "hub"):
        if device in lowered:
            score.add(10, f"Found network device: {device}")
    if IP_ADDRESS_RE.search(xml):
        score.add(30, "Found IP addresses")
    if "vlan" in lowered or "subnet" in lowered:
        score.add(20, "Found VLAN/subnet terminology")
    return score


def analyze_flowchart(xml: str) -> Score:
    score = Score(DiagramType.FLOWCHART)

    if style_shape(xml, "rhombus", "diamond", "mxgraph.flowchart.decision"):
        score.add(30, "Found decision diamonds")
    if style_shape(xml, "ellipse", "mxgraph.flowchart.terminator", "mxgraph.flowchart.start_1"):
        score.add(25, "Found start/end terminals")
    if style_shape(xml, "rectangle", "process", "mxgraph.flowchart.process"):
        score.add(20, "Found process rectangles")
    if "endArrow=" in xml or "arrow" in xml:
        score.add(15, "Found directional flow")
    if any(token in xml for token in ("uml", "cisco", "actor", "lifeline")):
        score.penalize(20)
    return score


def extract_xml_metadata(xml: str) -> DiagramMetadata:
    cells = len(CELL_RE.findall(xml))
    edges = len(EDGE_RE.findall(xml))
    shape_types: List[str] = []
    for style in STYLE_RE.findall(xml):
        match = SHAPE_RE.search(style)
        if match is not None:
            shape_types.append(match.group(1))

    return DiagramMetadata(
        total_shapes=max(0, cells - edges),
        total_edges=edges,
        shape_types=tuple(dict.fromkeys(shape_types)),
        has_specialized_shapes="uml" in xml or "cisco" in xml,
        has_directional_flow="endArrow=" in xml or "startArrow=" in xml,
        has_hierarchy="parent=" in xml and 'parent="1"' not in xml,
        has_temporal="sequence" in xml.lower() or "time" in xml.lower(),
        has_data_model="table" in xml or "entity" in xml,
        has_network_elements="cisco" in xml or "network" in xml,
    )


class DrawIODetector:
    """Source-aware detector for draw.io documents."""

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

    def load_source(self, data: bytes | str) -> str:
        """
        Decode document and inflate compressed pages.

        :param data: content of .drawio file
        :return: text to scan, document without compressed payloads followed by inflated pages
        :raises ValueError: if content is not a draw.io document
        :raises ET.ParseError: if content is not XML
        """
        text = data.decode(self.encoding) if isinstance(data, bytes) else data
        root = ET.fromstring(text)
        if root.tag == "mxGraphModel":
            return text
        if root.tag != "mxfile":
            raise ValueError(f"Not a draw.io document, root element is <{root.tag}>")

        wrapper = text
        pages = []
        for diagram in root.iter("diagram"):
            payload = (diagram.text or "").strip()
            if diagram.find("mxGraphModel") is not None or not payload:
                continue
            # Base64 is not markup, only the inflated page is scanned
            wrapper = wrapper.replace(payload, "")
            page = inflate_page(payload)
            if page is None:
                log.warning("Can't inflate page %s, skipping it", diagram.get("name", diagram.get("id", "?")))
                continue
            pages.append(page)
        return "\n".join([wrapper] + pages)

    def analyze_raw(self, data: bytes | str) -> DiagramAnalysis:
        try:
            xml = self.load_source(data)
        except (UnicodeDecodeError, ET.ParseError, ValueError) as error:
            log.warning("Can't analyze draw.io content: %s", error)
            return empty_analysis()

        analysis = select_best((scorer(xml) for scorer in self.scorers), extract_xml_metadata(xml))
        log.debug("Detected %s with confidence %s", analysis.detected_type.value, analysis.confidence)
        return analysis
