"""
Rule catalogue for shape based detection.

Every diagram type has one :class:`DetectionRule`. Rules are plain data: a
floor and a list of weighted matchers. Matchers are pure functions of the
shape list and its metadata; their confidence grows with the amount of
evidence found and is capped at 100.

Order of :data:`DEFAULT_RULES` is the tie-break priority, flowchart is the
generic fallback and stays last.
"""

import re
from typing import TYPE_CHECKING, Sequence
from convert2mermaid.detection.metadata import split_shapes
from convert2mermaid.detection.types import (
    DetectionResult,
    DetectionRule,
    DiagramMetadata,
    DiagramType,
    PatternMatcher,
)
from convert2mermaid.utils import IP_ADDRESS_RE, contains_any, contains_word

if TYPE_CHECKING:
    from convert2mermaid.model import Shape

# Visibility prefix at start of a line or compartment, or a call signature
MEMBER_NOTATION_RE = re.compile(r"(?:^|[\n|])\s*[+\-#~]\s*\w|\w\(.*?\)")
# Whole multiplicity token: "1", "*", "0..1", "1..*"
MULTIPLICITY_RE = re.compile(r"(?:^|\s)(?:\d+|\*)(?:\.\.(?:\d+|\*))?(?:\s|$)")
CARDINALITY_TOKENS = ("1:1", "1:M", "1:N", "M:N")


def scaled(count: int, base: float, step: float) -> float:
    """Confidence growing with evidence count, capped at 100."""
    return min(100, base + step * count)


def no_match() -> DetectionResult:
    return DetectionResult(matches=False)


# Sequence


def uml_actors(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    typed = 0
    labelled = 0
    for s in shapes:
        if contains_any(s.shape_type, ("actor",)):
            typed += 1
        elif contains_word(s.label, ("actor",)):
            labelled += 1
    count = typed + labelled
    # One actor alone stays below the sequence floor
    return DetectionResult(
        matches=count > 0,
        confidence=min(100, 50 * typed + 25 * labelled),
        evidence=(f"Found {count} actor shapes",),
    )


def lifelines(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    nodes, edges = split_shapes(shapes)
    # Nodes sending a message to another node behave like lifelines
    senders = {e.from_node for e in edges if e.from_node and e.from_node != e.to_node}
    typed = 0
    topological = 0
    for node in nodes:
        if contains_any(node.shape_type, ("lifeline",)):
            typed += 1
        elif node.id and node.id in senders:
            topological += 1
    count = typed + topological
    return DetectionResult(
        matches=count > 1,
        confidence=min(100, 50 * typed + 10 * topological),
        evidence=(f"Found {count} potential lifelines",),
    )


def message_flows(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    _, edges = split_shapes(shapes)
    messages = [e for e in edges if contains_any(e.label, ("call", "message", ":"))]
    return DetectionResult(
        matches=len(messages) > 0,
        confidence=scaled(len(messages), 50, 15),
        evidence=(f"Found {len(messages)} message flows",),
    )


def sequence_keywords(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    terms = ("activate", "deactivate", "create", "destroy", "call", "return", "response")
    if not any(contains_any(s.label, terms) for s in shapes):
        return no_match()
    return DetectionResult(matches=True, confidence=80, evidence=("Found temporal keywords in labels",))


# Class


def class_shapes(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    classes = [
        s
        for s in shapes
        if contains_any(s.shape_type, ("class", "interface", "swimlane")) or ("|" in s.label and "-" in s.label)
    ]
    return DetectionResult(
        matches=len(classes) > 0,
        confidence=scaled(len(classes), 50, 20),
        evidence=(f"Found {len(classes)} class-like shapes",),
    )


def attributes_methods(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    nodes, _ = split_shapes(shapes)
    members = [n for n in nodes if MEMBER_NOTATION_RE.search(n.label)]
    return DetectionResult(
        matches=len(members) > 0,
        confidence=scaled(len(members), 40, 20),
        evidence=(f"Found class attributes/methods notation in {len(members)} shapes",),
    )


def associations(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    _, edges = split_shapes(shapes)
    found = [e for e in edges if MULTIPLICITY_RE.search(e.label)]
    return DetectionResult(
        matches=len(found) > 0,
        confidence=scaled(len(found), 50, 25),
        evidence=(f"Found {len(found)} associations with multiplicity",),
    )


def inheritance(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    _, edges = split_shapes(shapes)
    found = [e for e in edges if contains_any(e.shape_type, ("inheritance", "generalization"))]
    return DetectionResult(
        matches=len(found) > 0,
        confidence=95,
        evidence=(f"Found {len(found)} inheritance relationships",),
    )


# State


def start_end_states(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    starts = 0
    ends = 0
    typed = False
    for s in shapes:
        if contains_any(s.shape_type, ("startstate", "initialstate")):
            starts += 1
            typed = True
        elif contains_word(s.label, ("start",)):
            starts += 1
        if contains_any(s.shape_type, ("endstate", "finalstate")):
            ends += 1
            typed = True
        elif contains_word(s.label, ("end",)):
            ends += 1
    # Start/End labels alone are just as common in flowcharts
    confidence = 90 if typed else 60
    return DetectionResult(
        matches=starts > 0 or ends > 0,
        confidence=confidence,
        evidence=(f"Found {starts} start and {ends} end states",),
    )


def rounded_rectangles(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    nodes, _ = split_shapes(shapes)
    rounded = [n for n in nodes if n.style.rounding > 0 or contains_any(n.shape_type, ("rounded",))]
    return DetectionResult(
        matches=len(rounded) > 2,
        confidence=scaled(len(rounded), 40, 15),
        evidence=(f"Found {len(rounded)} rounded state shapes",),
    )


def transitions(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    _, edges = split_shapes(shapes)
    found = [e for e in edges if "/" in e.label or "[" in e.label or contains_word(e.label, ("when",))]
    return DetectionResult(
        matches=len(found) > 0,
        confidence=scaled(len(found), 50, 20),
        evidence=(f"Found {len(found)} state transitions with triggers",),
    )


def state_keywords(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    terms = ("idle", "active", "waiting", "processing", "complete", "error")
    if not any(contains_any(s.label, terms) for s in shapes):
        return no_match()
    return DetectionResult(matches=True, confidence=75, evidence=("Found state-related keywords",))


# Component


def component_shapes(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    components = [
        s
        for s in shapes
        if contains_any(s.shape_type, ("component", "module"))
        or contains_any(s.label, ("<<component>>", "<<module>>"))
    ]
    return DetectionResult(
        matches=len(components) > 0,
        confidence=scaled(len(components), 50, 20),
        evidence=(f"Found {len(components)} component shapes",),
    )


def interfaces(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    declared = 0
    ellipses = 0
    for s in shapes:
        if contains_any(s.shape_type, ("interface",)) or contains_any(s.label, ("<<interface>>",)):
            declared += 1
        elif contains_any(s.shape_type, ("ellipse",)):
            ellipses += 1
    count = declared + ellipses
    return DetectionResult(
        matches=count > 0,
        confidence=min(100, 40 * declared + 15 * ellipses),
        evidence=(f"Found {count} interface elements",),
    )


def dependencies(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    _, edges = split_shapes(shapes)
    found = [e for e in edges if e.style.line_pattern == 2 or contains_any(e.label, ("depends", "uses"))]
    return DetectionResult(
        matches=len(found) > 0,
        confidence=scaled(len(found), 40, 20),
        evidence=(f"Found {len(found)} dependency relationships",),
    )


def stereotypes(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    if not any("<<" in s.label and ">>" in s.label for s in shapes):
        return no_match()
    return DetectionResult(matches=True, confidence=85, evidence=("Found stereotype notation",))


# Entity relationship


def entities(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    nodes, _ = split_shapes(shapes)
    tables = 0
    rectangles = 0
    for node in nodes:
        if contains_any(node.shape_type, ("rhombus",)):
            continue
        if contains_any(node.shape_type, ("table", "entity")):
            tables += 1
        elif contains_any(node.shape_type, ("rectangle",)):
            rectangles += 1
    count = tables + rectangles
    return DetectionResult(
        matches=count > 1,
        confidence=min(100, 35 * tables + 15 * rectangles),
        evidence=(f"Found {count} potential entities",),
    )


def relationship_diamonds(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    nodes, _ = split_shapes(shapes)
    diamonds = [n for n in nodes if contains_any(n.shape_type, ("rhombus", "diamond"))]
    return DetectionResult(
        matches=len(diamonds) > 0,
        confidence=scaled(len(diamonds), 50, 20),
        evidence=(f"Found {len(diamonds)} relationship diamonds",),
    )


def attribute_ellipses(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    nodes, _ = split_shapes(shapes)
    ellipses = [n for n in nodes if contains_any(n.shape_type, ("ellipse",))]
    return DetectionResult(
        matches=len(ellipses) > 0,
        confidence=scaled(len(ellipses), 40, 15),
        evidence=(f"Found {len(ellipses)} attribute ellipses",),
    )


def cardinality(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    _, edges = split_shapes(shapes)
    if not any(token in e.label.upper() for e in edges for token in CARDINALITY_TOKENS):
        return no_match()
    return DetectionResult(matches=True, confidence=90, evidence=("Found cardinality notation",))


# Network


def network_shapes(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    devices = ("cisco", "network", "router", "switch", "server", "firewall")
    found = [s for s in shapes if contains_any(s.shape_type, devices)]
    return DetectionResult(
        matches=len(found) > 0,
        confidence=scaled(len(found), 60, 15),
        evidence=(f"Found {len(found)} network device shapes",),
    )


def ip_addresses(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    if not any(IP_ADDRESS_RE.search(s.label) for s in shapes):
        return no_match()
    return DetectionResult(matches=True, confidence=95, evidence=("Found IP addresses in labels",))


def vlans(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    if not any(contains_any(s.label, ("vlan", "subnet")) for s in shapes):
        return no_match()
    return DetectionResult(matches=True, confidence=85, evidence=("Found VLAN/subnet terminology",))


def network_terms(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    terms = ("gateway", "dns", "dhcp", "nat", "vpn", "wan", "lan")
    if not any(contains_word(s.label, terms) for s in shapes):
        return no_match()
    return DetectionResult(matches=True, confidence=80, evidence=("Found network-specific terminology",))


# Flowchart


def decision_shapes(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    nodes, _ = split_shapes(shapes)
    decisions = [
        n
        for n in nodes
        if contains_any(n.shape_type, ("diamond", "rhombus", "decision"))
        or "?" in n.label
        or contains_word(n.label, ("if", "decision"))
    ]
    return DetectionResult(
        matches=len(decisions) > 0,
        confidence=scaled(len(decisions), 60, 15),
        evidence=(f"Found {len(decisions)} decision points",),
    )


def process_shapes(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    nodes, _ = split_shapes(shapes)
    processes = [n for n in nodes if contains_any(n.shape_type, ("rectangle", "process"))]
    return DetectionResult(
        matches=len(processes) > 2,
        confidence=scaled(len(processes), 40, 10),
        evidence=(f"Found {len(processes)} process steps",),
    )


def start_end_terminals(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    nodes, _ = split_shapes(shapes)
    terminals = [
        n
        for n in nodes
        if contains_any(n.shape_type, ("ellipse", "terminator"))
        or contains_word(n.label, ("start", "end", "begin"))
    ]
    return DetectionResult(
        matches=len(terminals) > 0,
        confidence=scaled(len(terminals), 30, 20),
        evidence=(f"Found {len(terminals)} start/end terminals",),
    )


def directional_flow(shapes: Sequence["Shape"], metadata: DiagramMetadata) -> DetectionResult:
    return DetectionResult(
        matches=metadata.has_directional_flow,
        confidence=70,
        evidence=("Found directional flow between elements",),
    )


SEQUENCE_RULE = DetectionRule(
    type=DiagramType.SEQUENCE,
    minimum_confidence=60,
    patterns=(
        PatternMatcher("uml-actors", 30, uml_actors),
        PatternMatcher("lifelines", 35, lifelines),
        PatternMatcher("message-flows", 25, message_flows),
        PatternMatcher("temporal-keywords", 10, sequence_keywords),
    ),
)

CLASS_RULE = DetectionRule(
    type=DiagramType.CLASS,
    minimum_confidence=65,
    patterns=(
        PatternMatcher("class-shapes", 40, class_shapes),
        PatternMatcher("attributes-methods", 30, attributes_methods),
        PatternMatcher("associations", 20, associations),
        PatternMatcher("inheritance", 10, inheritance),
    ),
)

STATE_RULE = DetectionRule(
    type=DiagramType.STATE,
    minimum_confidence=70,
    patterns=(
        PatternMatcher("start-end-states", 35, start_end_states),
        PatternMatcher("rounded-rectangles", 25, rounded_rectangles),
        PatternMatcher("transitions", 30, transitions),
        PatternMatcher("state-keywords", 10, state_keywords),
    ),
)

COMPONENT_RULE = DetectionRule(
    type=DiagramType.COMPONENT,
    minimum_confidence=60,
    patterns=(
        PatternMatcher("component-shapes", 40, component_shapes),
        PatternMatcher("interfaces", 30, interfaces),
        PatternMatcher("dependencies", 20, dependencies),
        PatternMatcher("stereotypes", 10, stereotypes),
    ),
)

ENTITY_RELATIONSHIP_RULE = DetectionRule(
    type=DiagramType.ENTITY_RELATIONSHIP,
    minimum_confidence=65,
    patterns=(
        PatternMatcher("entities", 35, entities),
        PatternMatcher("relationships", 30, relationship_diamonds),
        PatternMatcher("attributes", 25, attribute_ellipses),
        PatternMatcher("cardinality", 10, cardinality),
    ),
)

NETWORK_RULE = DetectionRule(
    type=DiagramType.NETWORK,
    minimum_confidence=70,
    patterns=(
        PatternMatcher("network-shapes", 40, network_shapes),
        PatternMatcher("ip-addresses", 30, ip_addresses),
        PatternMatcher("vlans", 20, vlans),
        PatternMatcher("network-terms", 10, network_terms),
    ),
)

FLOWCHART_RULE = DetectionRule(
    type=DiagramType.FLOWCHART,
    minimum_confidence=40,
    patterns=(
        PatternMatcher("decision-shapes", 30, decision_shapes),
        PatternMatcher("process-shapes", 25, process_shapes),
        PatternMatcher("start-end-terminals", 25, start_end_terminals),
        PatternMatcher("directional-flow", 20, directional_flow),
    ),
)

DEFAULT_RULES = (
    SEQUENCE_RULE,
    CLASS_RULE,
    STATE_RULE,
    COMPONENT_RULE,
    ENTITY_RELATIONSHIP_RULE,
    NETWORK_RULE,
    FLOWCHART_RULE,
)
