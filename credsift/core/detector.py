from __future__ import annotations
import json
import re
from typing import Any, Callable, List, Tuple

JSON = "json"
YAML = "yaml"
XML = "xml"
TOML = "toml"
ENV = "env"
UNKNOWN = "unknown"

YAML_BLOCK_KEY_RE = re.compile(r"^\w+:\s*$", re.MULTILINE | re.ASCII)
TOML_SECTION_RE = re.compile(r"^\[[\w.]+\]$", re.MULTILINE | re.ASCII)
ENV_LINE_RE = re.compile(r"^([A-Z_][A-Z0-9_]*)\s*=\s*(.+)$")


def reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def load_json(text: str) -> Any:
    """Strict ``json.loads``: NaN/Infinity literals are rejected."""

    return json.loads(text, parse_constant=reject_constant)


def _is_json(text: str) -> bool:
    try:
        load_json(text)
    except (ValueError, RecursionError):
        return False
    return True


def _looks_like_yaml(text: str) -> bool:
    return "---" in text or YAML_BLOCK_KEY_RE.search(text) is not None


def _looks_like_toml(text: str) -> bool:
    return TOML_SECTION_RE.search(text) is not None


def _opens_with_section(text: str) -> bool:
    first_line = text.split("\n", 1)[0]
    return TOML_SECTION_RE.fullmatch(first_line) is not None


def _looks_like_env(text: str) -> bool:
    return any(ENV_LINE_RE.match(line) for line in text.splitlines())


# Checked in order after the leading-character rules; first hit wins.
STRUCTURAL_RULES: List[Tuple[Callable[[str], bool], str]] = [
    (_looks_like_yaml, YAML),
    (_looks_like_toml, TOML),
    (_looks_like_env, ENV),
]


def detect_format(text: str) -> str:
    stripped = text.strip()
    if not stripped:
        return UNKNOWN

    first = stripped[0]
    if first in "{[":
        if _is_json(stripped):
            return JSON
        # JSON-looking text that fails to load is never tried as anything
        # else, unless it opens with a bare TOML table header
        if not _opens_with_section(stripped):
            return UNKNOWN
    if first == "<":
        return XML

    for predicate, label in STRUCTURAL_RULES:
        if predicate(stripped):
            return label
    return UNKNOWN
