import json
import yaml
import logging
from pydantic import ValidationError
from pathlib import Path
from convert2mermaid.config import Configuration, JSON
from typing import Iterable
import re

#: Dotted quad, no range check on octets.
IP_ADDRESS_RE = re.compile(r"\b\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}\b")


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """Case insensitive substring test.

    :param text: text to search in
    :param keywords: lower case keywords
    :return: True if any keyword is part of text
    """
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def contains_word(text: str, keywords: Iterable[str]) -> bool:
    """Case insensitive whole word test.

    Short vocabulary like ``nat`` or ``lan`` would otherwise match inside
    ordinary words (``signature``, ``plan``).

    :param text: text to search in
    :param keywords: lower case keywords
    :return: True if any keyword is present as a separate word
    """
    lowered = text.lower()
    return any(re.search(rf"\b{re.escape(keyword)}\b", lowered) for keyword in keywords)


def load_config_file(path: str | Path) -> JSON:
    if isinstance(path, str):
        path = Path(path)
    with open(path, encoding="UTF-8") as file:
        if path.suffix in [".yaml", ".yml"]:
            loaded = yaml.safe_load(file)
        else:
            loaded = json.load(file)
    return loaded


def load_config(file_name: str | Path | None = None) -> Configuration:
    """Load configuration, defaults if no file is given.

    An empty YAML document is treated as "all defaults".
    """
    if file_name is None:
        return Configuration()
    try:
        return Configuration().model_validate(load_config_file(file_name) or {})
    except ValidationError as error:
        raise ValueError("Error parsing configuration file") from error


class LogFormatter(logging.Formatter):
    _grey = "\x1b[38;21m"
    _green = "\x1b[32m"
    _red = "\x1b[31;21m"
    _bold_red = "\x1b[31;1m"
    _yellow = "\u001b[33m"
    _blue = "\u001b[34m"
    _white = "\u001b[37m"
    _reset = "\x1b[0m"
    _bold = "\u001b[1m"
    _prefix = (
        _green
        + "%(asctime)s  "
        + _reset
        + _blue
        + "%(name)s "
        + _reset
        + _white
        + "%(funcName)s "
        + _reset
        + _bold
        + _grey
        + "%(levelname)s "
        + _reset
    )
    _message = "%(message)s"
    _formats = {
        logging.DEBUG: _prefix + _grey + _message + _reset,
        logging.INFO: _prefix + _white + _message + _reset,
        logging.WARNING: _prefix + _yellow + _message + _reset,
        logging.ERROR: _prefix + _red + _message + _reset,
        logging.CRITICAL: _prefix + _bold_red + _message + _reset,
    }

    def format(self, record):
        log_fmt = self._formats.get(record.levelno)
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)
