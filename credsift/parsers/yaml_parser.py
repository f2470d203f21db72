from __future__ import annotations
import re
from typing import Iterator

from .base import ParserPlugin
from ..core.models import Candidate

YAML_PAIR_RE = re.compile(r"^\s*([a-zA-Z_][\w.-]*)\s*:\s*(.+)$", re.ASCII)
BLOCK_SCALAR_INDICATORS = ("|", ">")


class YAMLParser(ParserPlugin):
    NAME = "yaml"

    def extract(self, text: str) -> Iterator[Candidate]:
        for line in self.lines(text):
            m = YAML_PAIR_RE.match(line)
            if not m:
                continue
            c = self.candidate(m.group(1), m.group(2))
            # block scalar bodies span several lines and are not rebuilt
            if c.value and not c.value.startswith(BLOCK_SCALAR_INDICATORS):
                yield c


YAML = YAMLParser
