"""Tests for CLI commands."""

import importlib.metadata
import json
import pytest
from click.testing import CliRunner
from convert2mermaid.cli import analyze, cli, reliability


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


class TestAnalyzeCommand:
    """Tests for the 'analyze' command."""

    def test_basic_execution(self, runner, data_dir):
        result = runner.invoke(analyze, ["--input", str(data_dir / "SequenceDiagram.drawio")])
        assert result.exit_code == 0
        assert "Detected type: sequence" in result.output
        assert "Confidence: 100%" in result.output
        assert "Reliability: High (very reliable)" in result.output
        assert "Detection evidence:" not in result.output

    def test_verbose(self, runner, data_dir):
        result = runner.invoke(analyze, ["--input", str(data_dir / "NetworkDiagram.drawio"), "--verbose"])
        assert result.exit_code == 0
        assert "Detected type: network" in result.output
        assert "Detection evidence:" in result.output
        assert "Found Cisco network shapes" in result.output
        assert "Metadata:" in result.output
        assert "Network Elements" in result.output

    def test_json_output(self, runner, data_dir):
        result = runner.invoke(analyze, ["--input", str(data_dir / "sample-state.puml"), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["detected_type"] == "state"
        assert data["confidence"] == 95
        assert data["patterns"][0]["type"] == "state"

    def test_shapes_file(self, runner, data_dir):
        result = runner.invoke(
            analyze,
            ["--input", str(data_dir / "network.vsdx"), "--shapes", str(data_dir / "network_shapes.json")],
        )
        assert result.exit_code == 0
        assert "Detected type: network" in result.output

    def test_invalid_shapes_file(self, runner, data_dir, tmp_path):
        shapes = tmp_path / "shapes.json"
        shapes.write_text(json.dumps([{"Label": "no id"}]))
        result = runner.invoke(analyze, ["--input", str(data_dir / "network.vsdx"), "--shapes", str(shapes)])
        assert result.exit_code != 0
        assert "Invalid shapes file" in result.output

    def test_unknown_diagram(self, runner, tmp_path):
        diagram = tmp_path / "broken.drawio"
        diagram.write_text("invalid xml content")
        result = runner.invoke(analyze, ["--input", str(diagram)])
        assert result.exit_code == 0
        assert "Detected type: unknown" in result.output
        assert "Reliability: Very low (unknown)" in result.output

    def test_missing_input(self, runner):
        result = runner.invoke(analyze, [])
        assert result.exit_code != 0
        assert "--input" in result.output

    def test_input_does_not_exist(self, runner):
        result = runner.invoke(analyze, ["--input", "nonexistent.drawio"])
        assert result.exit_code != 0

    def test_version_flag(self, runner):
        """Test --version displays version number."""
        result = runner.invoke(analyze, ["--version"])
        assert result.exit_code == 0
        assert "." in result.output
        assert "Detected type" not in result.output

    def test_version_outside_project_directory(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(analyze, ["--version"])
        assert result.exit_code == 0
        assert result.output.strip() == importlib.metadata.version("convert2mermaid")

    def test_debug_flag(self, runner, data_dir):
        result = runner.invoke(analyze, ["--input", str(data_dir / "SequenceDiagram.drawio"), "--debug"])
        assert result.exit_code == 0
        assert "Detected type: sequence" in result.output

    def test_config(self, runner, data_dir, tmp_path):
        diagram = tmp_path / "export.xml"
        diagram.write_bytes((data_dir / "SequenceDiagram.drawio").read_bytes())
        result = runner.invoke(analyze, ["--input", str(diagram), "--config", str(data_dir / "config.yaml")])
        assert result.exit_code == 0
        assert "Detected type: sequence" in result.output

    def test_invalid_config(self, runner, data_dir):
        result = runner.invoke(
            analyze, ["--input", str(data_dir / "SequenceDiagram.drawio"), "--config", "nonexistent.yaml"]
        )
        assert result.exit_code != 0

    def test_group(self, runner, data_dir):
        result = runner.invoke(cli, ["analyze", "--input", str(data_dir / "ClassDiagram.drawio")])
        assert result.exit_code == 0
        assert "Detected type: class" in result.output


@pytest.mark.parametrize(
    "confidence,expected",
    [
        (100, "High (very reliable)"),
        (80, "High (very reliable)"),
        (79.9, "Medium (good)"),
        (60, "Medium (good)"),
        (45, "Low (uncertain)"),
        (39, "Very low (unknown)"),
        (0, "Very low (unknown)"),
    ],
)
def test_reliability(confidence, expected):
    assert reliability(confidence) == expected
