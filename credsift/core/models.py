from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union


@dataclass
class Candidate:
    key: str
    value: str  # already normalized by the extractor


@dataclass
class ParseResult:
    key: str
    value: str
    app_name: Optional[str] = None  # set by the app-name inferencer

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"key": self.key, "value": self.value}
        if self.app_name is not None:
            data["appName"] = self.app_name
        return data


@dataclass
class ParserOptions:
    infer_app_name: bool = True
    strict_mode: bool = False

    @classmethod
    def coerce(cls, options: Union["ParserOptions", Mapping[str, Any], None]) -> "ParserOptions":
        """Accept a ParserOptions, a mapping (snake_case or camelCase keys) or None."""

        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls(
            infer_app_name=_pick(options, "infer_app_name", "inferAppName", True),
            strict_mode=_pick(options, "strict_mode", "strictMode", False),
        )


def _pick(options: Mapping[str, Any], name: str, alias: str, default: bool) -> bool:
    for k in (name, alias):
        v = options.get(k)
        if v is not None:
            return bool(v)
    return default


@dataclass
class FileResults:
    file_path: Path
    format: str
    results: List[ParseResult] = field(default_factory=list)
