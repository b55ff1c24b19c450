import click
import importlib.metadata
import json
import logging
from functools import wraps
from pydantic import ValidationError
from convert2mermaid.detection import DiagramAnalysis, analyze_file
from convert2mermaid.model import Diagram
from convert2mermaid.utils import load_config, LogFormatter

log = logging.getLogger(__name__)


def setup_command(func):
    """Decorator to handle common CLI setup (logging, config loading, version)."""

    @wraps(func)
    def wrapper(config, debug, version=None, **kwargs):
        # Handle --version flag
        if version is not None and version:
            click.echo(importlib.metadata.version("convert2mermaid"))
            return

        # Setup logging
        log_handler = logging.StreamHandler()
        log_handler.setFormatter(LogFormatter())
        logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING, handlers=[log_handler], force=True)

        # Load config
        config_obj = load_config(config)
        if debug:
            log.debug(json.dumps(config_obj.model_dump(), indent=4))

        # Call actual command with config_obj
        return func(config_obj=config_obj, debug=debug, **kwargs)

    return wrapper


def reliability(confidence: float) -> str:
    if confidence >= 80:
        return "High (very reliable)"
    if confidence >= 60:
        return "Medium (good)"
    if confidence >= 40:
        return "Low (uncertain)"
    return "Very low (unknown)"


def load_shapes(path: str) -> Diagram:
    """Load shapes exported by ingestion parser, either a list or a diagram object."""
    with open(path, encoding="UTF-8") as file:
        data = json.load(file)
    try:
        return Diagram.model_validate(data if isinstance(data, dict) else {"shapes": data})
    except ValidationError as error:
        raise click.BadParameter(f"Invalid shapes file: {error}", param_hint="--shapes") from error


def format_text(path: str, analysis: DiagramAnalysis, verbose: bool) -> str:
    lines = [
        f"Analyzing: {path}",
        f"Detected type: {analysis.detected_type.value}",
        f"Confidence: {analysis.confidence:.0f}%",
        f"Reliability: {reliability(analysis.confidence)}",
    ]
    if not verbose:
        return "\n".join(lines)

    lines.append("")
    lines.append("Detection evidence:")
    for pattern in sorted(analysis.patterns, key=lambda p: p.confidence, reverse=True):
        lines.append(f"  {pattern.type.value} ({pattern.confidence:.0f}%)")
        for evidence in pattern.evidence:
            lines.append(f"    - {evidence}")

    metadata = analysis.metadata
    lines.append("")
    lines.append("Metadata:")
    lines.append(f"  Shapes: {metadata.total_shapes}")
    lines.append(f"  Edges: {metadata.total_edges}")
    lines.append(f"  Shape types: {len(metadata.shape_types)}")
    features = [
        name
        for name, present in [
            ("Specialized Shapes", metadata.has_specialized_shapes),
            ("Directional Flow", metadata.has_directional_flow),
            ("Hierarchy", metadata.has_hierarchy),
            ("Temporal", metadata.has_temporal),
            ("Data Model", metadata.has_data_model),
            ("Network Elements", metadata.has_network_elements),
        ]
        if present
    ]
    if features:
        lines.append(f"  Features: {', '.join(features)}")
    return "\n".join(lines)


@click.group()
def cli():
    pass


@click.command()
@click.option("--config", default=None, help="Configuration file (defaults if not given).")
@click.option("--debug", default=False, is_flag=True, help="Enable debug.")
@click.option("--version", is_flag=True, help="Show the application's version.")
@click.option("--input", "input_file", type=click.Path(exists=True, dir_okay=False), help="Input diagram file.")
@click.option("--shapes", type=click.Path(exists=True, dir_okay=False), help="JSON file with parsed shapes.")
@click.option("--verbose", is_flag=True, help="Show detailed analysis.")
@click.option(
    "--format", type=click.Choice(["text", "json"], case_sensitive=False), default="text", help="Output format."
)
@setup_command
def analyze(config_obj, debug, input_file, shapes, verbose, format):
    """Detect diagram type without conversion."""
    if input_file is None:
        raise click.UsageError("Missing option '--input'.")

    parsed = load_shapes(shapes).shapes if shapes else None
    analysis = analyze_file(input_file, shapes=parsed, config=config_obj)

    if format == "json":
        click.echo(json.dumps(analysis.to_dict(), indent=2))
    else:
        click.echo(format_text(input_file, analysis, verbose))


cli.add_command(analyze)

if __name__ == "__main__":
    cli()
