"""
Detector factory - Returns appropriate diagram detector based on file type.

This is the error boundary of detection: :func:`analyze_file` never raises,
problems are logged and reported as an empty analysis.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Sequence
from convert2mermaid.config import Configuration
from convert2mermaid.detection.detector import DiagramDetector
from convert2mermaid.detection.drawio import DrawIODetector
from convert2mermaid.detection.plantuml import PlantUMLDetector
from convert2mermaid.detection.types import DiagramAnalysis, empty_analysis

if TYPE_CHECKING:
    from convert2mermaid.model import Shape

log = logging.getLogger(__name__)


def file_extension(path: str | Path) -> str:
    return Path(path).suffix.lower()


def _matches(extension: str, extensions: Sequence[str]) -> bool:
    return extension in [e.lower() for e in extensions]


def get_detector(path: str | Path, config: Optional[Configuration] = None):
    """
    Get the detector for a diagram file.

    :param path: path of diagram file, only the suffix is used
    :param config: configuration, defaults if None
    :return: DrawIODetector, PlantUMLDetector or generic DiagramDetector
    """
    config = config or Configuration()
    extension = file_extension(path)

    if _matches(extension, config.drawio_extensions):
        return DrawIODetector(encoding=config.encoding)
    elif _matches(extension, config.plantuml_extensions):
        return PlantUMLDetector(encoding=config.encoding)
    else:
        return DiagramDetector()


def analyze_shapes(shapes: Sequence["Shape"]) -> DiagramAnalysis:
    """Analyze shapes produced by any ingestion parser."""
    return DiagramDetector().analyze(shapes)


def _analyze(
    path: str | Path,
    data: Optional[bytes],
    shapes: Optional[Sequence["Shape"]],
    config: Configuration,
) -> DiagramAnalysis:
    extension = file_extension(path)
    source_aware = _matches(extension, config.drawio_extensions) or _matches(extension, config.plantuml_extensions)

    if source_aware:
        if data is None:
            data = Path(path).read_bytes()
        analysis = get_detector(path, config).analyze_raw(data)
        if analysis.confidence < config.shape_fallback_threshold and shapes:
            fallback = analyze_shapes(shapes)
            log.debug(
                "Source analysis of %s is %s (%s), shape analysis is %s (%s)",
                path,
                analysis.detected_type.value,
                analysis.confidence,
                fallback.detected_type.value,
                fallback.confidence,
            )
            if fallback.confidence > analysis.confidence:
                return fallback
        return analysis

    if _matches(extension, config.shape_extensions):
        if shapes is None:
            log.info("No shapes given for %s, parse it before detection", path)
            return empty_analysis()
        return analyze_shapes(shapes)

    log.warning("Unsupported diagram format %s (%s)", extension or "<none>", path)
    return empty_analysis()


def analyze_file(
    path: str | Path,
    data: Optional[bytes] = None,
    shapes: Optional[Sequence["Shape"]] = None,
    config: Optional[Configuration] = None,
) -> DiagramAnalysis:
    """
    Detect diagram type of a file.

    :param path: path of diagram file, suffix selects the detector
    :param data: already read content of the file, read from path if None
    :param shapes: shapes parsed from the file, used for formats without source-aware detector
    :param config: configuration, defaults if None
    :return: analysis, empty analysis on any error
    """
    try:
        return _analyze(path, data, shapes, config or Configuration())
    except OSError as error:
        log.warning(f"Can't read diagram file {path}: {error}")
        return empty_analysis()
    except Exception as error:
        log.error(f"Error analyzing file {path}: {error}")
        return empty_analysis()
