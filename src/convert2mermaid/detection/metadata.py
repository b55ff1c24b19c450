"""Metadata extraction from normalized shape lists."""

from typing import TYPE_CHECKING, List, Sequence
from convert2mermaid.detection.types import DiagramMetadata
from convert2mermaid.utils import contains_any

if TYPE_CHECKING:
    from convert2mermaid.model import Shape

SPECIALIZED_KEYWORDS = ("uml", "cisco", "class", "component", "actor", "lifeline")
TEMPORAL_KEYWORDS = ("time", "sequence", "order", "step", "phase", "before", "after")
DATA_MODEL_KEYWORDS = ("table", "entity", "attribute", "relation", "key", "field")
NETWORK_KEYWORDS = ("router", "switch", "server", "firewall", "cisco", "network")

# More nodes than connections suggests containment rather than flow
HIERARCHY_EDGE_RATIO = 0.5


def split_shapes(shapes: Sequence["Shape"]) -> tuple[List["Shape"], List["Shape"]]:
    """Split shapes into (nodes, edges)."""
    nodes = [shape for shape in shapes if not shape.is_edge]
    edges = [shape for shape in shapes if shape.is_edge]
    return nodes, edges


def end_arrow(edge: "Shape") -> int:
    """Arrow head code of an edge, 0 when the parser gave no style."""
    style = getattr(edge, "style", None)
    return getattr(style, "end_arrow", 0) or 0


def extract_metadata(shapes: Sequence["Shape"]) -> DiagramMetadata:
    nodes, edges = split_shapes(shapes)
    shape_types = tuple(dict.fromkeys(shape.shape_type for shape in shapes))

    return DiagramMetadata(
        total_shapes=len(nodes),
        total_edges=len(edges),
        shape_types=shape_types,
        has_specialized_shapes=any(contains_any(t, SPECIALIZED_KEYWORDS) for t in shape_types),
        has_directional_flow=any(end_arrow(edge) > 0 for edge in edges),
        has_hierarchy=len(nodes) > 0 and len(edges) / len(nodes) < HIERARCHY_EDGE_RATIO,
        has_temporal=any(contains_any(shape.label, TEMPORAL_KEYWORDS) for shape in shapes),
        has_data_model=any(contains_any(t, DATA_MODEL_KEYWORDS) for t in shape_types),
        has_network_elements=any(contains_any(t, NETWORK_KEYWORDS) for t in shape_types),
    )
