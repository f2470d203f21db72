from __future__ import annotations
import re
from typing import Iterator

from .base import ParserPlugin
from ..core.models import Candidate

KEY_VALUE_RE = re.compile(r"[\"']?([a-zA-Z_][\w.-]*)[\"']?\s*[:=]\s*[\"']?([^\n\"']+)[\"']?", re.ASCII)


class TextParser(ParserPlugin):
    """Loose key/value scan for text no detector recognised."""
    NAME = "text"
    # Values with more words than this read as prose, not credentials
    MAX_VALUE_TOKENS = 5

    def extract(self, text: str) -> Iterator[Candidate]:
        for m in KEY_VALUE_RE.finditer(text):
            c = self.candidate(m.group(1), m.group(2))
            if c.value and len(c.value.split()) <= self.MAX_VALUE_TOKENS:
                yield c


# Alias for dynamic discovery
Text = TextParser
