from convert2mermaid.utils import load_config, contains_any, contains_word, IP_ADDRESS_RE
from pathlib import Path
import pytest


def test_load_json() -> None:
    path = Path(__file__).parent / "data" / "config.json"
    config = load_config(path)
    assert config.drawio_extensions == [".drawio", ".xml"]
    assert config.shape_fallback_threshold == 60


def test_load_yaml() -> None:
    path = Path(__file__).parent / "data" / "config.yaml"
    config = load_config(path)
    assert config.plantuml_extensions == [".puml", ".pu"]
    assert config.shape_fallback_threshold == 60


def test_load_defaults() -> None:
    config = load_config()
    assert config.drawio_extensions == [".drawio"]
    assert config.shape_fallback_threshold == 80


def test_load_empty_yaml(tmp_path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path).encoding == "utf-8"


def test_load_file_does_not_exist() -> None:
    path = "not_exists"
    with pytest.raises(FileNotFoundError):
        load_config(path)


def test_load_file_wrong_data() -> None:
    path = Path(__file__).parent / "data" / "wrong.yaml"
    with pytest.raises(ValueError):
        load_config(path)


@pytest.mark.parametrize(
    "text,keywords,expected",
    [
        ("Core ROUTER", ("router",), True),
        ("", ("router",), False),
        ("Database", ("table", "base"), True),
        ("Web App", ("actor",), False),
    ],
)
def test_contains_any(text, keywords, expected):
    assert contains_any(text, keywords) == expected


@pytest.mark.parametrize(
    "text,keywords,expected",
    [
        ("NAT gateway", ("nat",), True),
        ("signature plan", ("nat", "lan"), False),
        ("Start", ("start",), True),
        ("Restart service", ("start",), False),
        ("is it valid?", ("if",), False),
    ],
)
def test_contains_word(text, keywords, expected):
    assert contains_word(text, keywords) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("host 192.168.1.10", True),
        ("10.0.0.1/24", True),
        ("version 1.2.3", False),
        ("no address", False),
    ],
)
def test_ip_address(text, expected):
    assert (IP_ADDRESS_RE.search(text) is not None) == expected
