from __future__ import annotations
import enum
import json
import re
from typing import Any, Iterator, List

from .base import ParserPlugin
from ..core.detector import reject_constant
from ..core.models import Candidate

# Used when the document does not load: pulls "key": "value" pairs out of
# near-JSON or truncated JSON.
JSON_PAIR_RE = re.compile(r"\"([^\"]+)\"\s*:\s*\"([^\"]+)\"")


class JsonKind(enum.Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    OTHER = "other"  # true/false/null


class _Number(str):
    """A JSON number kept in its source spelling."""


def json_kind(value: Any) -> JsonKind:
    if isinstance(value, dict):
        return JsonKind.OBJECT
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, _Number):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    return JsonKind.OTHER


def _load(text: str) -> Any:
    return json.loads(
        text,
        parse_int=_Number,
        parse_float=_Number,
        parse_constant=reject_constant,
    )


def _flatten_json(obj: Any, path: List[str], out: List[Candidate]) -> None:
    for k, v in obj.items():
        key_path = path + [str(k)]
        kind = json_kind(v)
        if kind is JsonKind.OBJECT:
            _flatten_json(v, key_path, out)
        elif kind in (JsonKind.STRING, JsonKind.NUMBER):
            out.append(ParserPlugin.candidate(".".join(key_path), str(v)))


class JSONParser(ParserPlugin):
    NAME = "json"

    def extract(self, text: str) -> Iterator[Candidate]:
        try:
            data = _load(text)
            flattened: List[Candidate] = []
            if json_kind(data) is JsonKind.OBJECT:
                _flatten_json(data, [], flattened)
        except (ValueError, RecursionError):
            flattened = [self.candidate(m.group(1), m.group(2)) for m in JSON_PAIR_RE.finditer(text)]
        for c in flattened:
            if c.value:
                yield c


JSON = JSONParser
