from __future__ import annotations
import re
from typing import Iterator

from .base import ParserPlugin
from ..core.models import Candidate

XML_ATTR_RE = re.compile(r"(\w+)\s*=\s*[\"']([^\"']+)[\"']", re.ASCII)
XML_ELEMENT_RE = re.compile(r"<(\w+)>([^<]+)</\1>", re.ASCII)


class XMLParser(ParserPlugin):
    """Regex scan of config-style XML: attributes, then leaf elements.

    Nested elements are not walked; ``<db><host>x</host></db>`` only yields
    ``host``.
    """
    NAME = "xml"

    def extract(self, text: str) -> Iterator[Candidate]:
        for m in XML_ATTR_RE.finditer(text):
            c = self.candidate(m.group(1), m.group(2))
            if c.value:
                yield c
        for m in XML_ELEMENT_RE.finditer(text):
            c = self.candidate(m.group(1), m.group(2))
            if c.value:
                yield c


XML = XMLParser
