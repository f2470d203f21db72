from __future__ import annotations
import re
from typing import Iterator

from .base import ParserPlugin
from ..core.models import Candidate

TOML_SECTION_RE = re.compile(r"^\[([^\]]+)\]$")
TOML_PAIR_RE = re.compile(r"^([a-zA-Z_][\w.-]*)\s*=\s*(.+)$", re.ASCII)


class TOMLParser(ParserPlugin):
    NAME = "toml"

    def extract(self, text: str) -> Iterator[Candidate]:
        section = ""
        for line in self.lines(text):
            m = TOML_SECTION_RE.match(line)
            if m:
                # a new header replaces the prefix, tables do not stack
                section = m.group(1)
                continue
            m = TOML_PAIR_RE.match(line)
            if not m:
                continue
            key = f"{section}.{m.group(1)}" if section else m.group(1)
            c = self.candidate(key, m.group(2))
            if c.value:
                yield c


TOML = TOMLParser
