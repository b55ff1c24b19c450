"""Stuff related to application configuration."""

from pydantic import BaseModel, ConfigDict, Field
from typing import TypeAlias, List

#: General JSON type
JSON: TypeAlias = dict[str, "JSON"] | list["JSON"] | str | int | float | bool | None


class Configuration(BaseModel):
    """Detection settings.

    Extensions are matched case-insensitively against the final path suffix,
    so they are stored lower case with the leading dot.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)
    #: Extensions handled by the draw.io source-aware detector.
    drawio_extensions: List[str] = [".drawio"]
    #: Extensions handled by the PlantUML source-aware detector.
    plantuml_extensions: List[str] = [".puml", ".plantuml"]
    #: Extensions that are only analyzed after an ingestion parser produced shapes.
    shape_extensions: List[str] = [".vsdx", ".excalidraw"]
    #: Encoding used to decode raw diagram sources.
    encoding: str = "utf-8"
    #: Source-aware results below this confidence are compared with shape analysis, if shapes are given.
    shape_fallback_threshold: float = Field(default=80, ge=0, le=100)
