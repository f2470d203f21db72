from __future__ import annotations
from typing import Iterator

from ..core.models import Candidate
from ..core.utils import iter_lines, normalize_value


class ParserPlugin:
    """
    Base class for extractor plugins. Subclasses set NAME to the format label
    returned by the detector and implement extract(). Extractors must never
    raise: fragments that do not parse are skipped.
    """
    NAME = "base"

    def extract(self, text: str) -> Iterator[Candidate]:
        raise NotImplementedError("extract must be implemented in subclasses")

    # Helpers shared by the line-oriented extractors
    @staticmethod
    def candidate(key: str, raw_value: str) -> Candidate:
        return Candidate(key=key, value=normalize_value(raw_value))

    @staticmethod
    def lines(text: str) -> Iterator[str]:
        return iter_lines(text)
