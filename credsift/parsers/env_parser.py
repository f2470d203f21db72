from __future__ import annotations
from typing import Iterator

from .base import ParserPlugin
from ..core.detector import ENV_LINE_RE
from ..core.models import Candidate


class EnvParser(ParserPlugin):
    NAME = "env"

    def extract(self, text: str) -> Iterator[Candidate]:
        for line in self.lines(text):
            m = ENV_LINE_RE.match(line)
            if not m:
                continue
            c = self.candidate(m.group(1), m.group(2))
            if c.value:
                yield c


# Alias for dynamic discovery
Env = EnvParser
