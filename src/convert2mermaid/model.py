"""Normalized diagram model.

Ingestion parsers (Visio, draw.io, Excalidraw, PlantUML) turn their sources
into a flat list of shapes. Nodes and edges share one type; edges have
``is_edge`` set and reference node ids. The model also accepts the PascalCase
field names the parsers emit (``ShapeType``, ``IsEdge``, ``FromNode``...).
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal
from convert2mermaid.detection.types import DiagramAnalysis, DiagramType


class LocalBaseModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, validate_by_name=True, validate_by_alias=True)


class ShapeStyle(LocalBaseModel):
    fill_foreground: str = ""
    fill_background: str = ""
    text_color: str = ""
    line_weight: float = 1
    line_color: str = ""
    #: 0 or 1 is solid, 2 is dashed (Visio line pattern codes)
    line_pattern: int = 0
    rounding: float = 0
    begin_arrow: int = 0
    begin_arrow_size: int = 0
    #: Zero means no arrow head
    end_arrow: int = 0
    end_arrow_size: int = 0
    line_cap: int = 0
    fill_pattern: int = 0


class Shape(LocalBaseModel):
    id: str
    shape_type: str = ""
    label: str = ""
    style: ShapeStyle = ShapeStyle()
    is_edge: bool = False
    #: Empty if the source format could not resolve the endpoint
    from_node: str = ""
    to_node: str = ""


class Diagram(LocalBaseModel):
    shapes: List[Shape] = []
    settings: Optional[str] = None
    analysis: Optional[DiagramAnalysis] = None

    @property
    def rendering_type(self) -> DiagramType:
        """Diagram type generators should render.

        Flowchart is the default when nothing was detected.
        """
        if self.analysis is None or self.analysis.detected_type == DiagramType.UNKNOWN:
            return DiagramType.FLOWCHART
        return self.analysis.detected_type
