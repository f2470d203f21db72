from __future__ import annotations
import re
from typing import Iterable, List

from ..core.models import ParseResult

# Settings
KEY_RE = re.compile(r"[a-zA-Z_][\w.-]*", re.ASCII)
MIN_VALUE_LENGTH = 2
NOISY_WORDS = [
    "example",
    "test",
    "dummy",
    "placeholder",
    "todo",
]


def is_valid(result: ParseResult) -> bool:
    if not KEY_RE.fullmatch(result.key):
        return False
    if len(result.value) < MIN_VALUE_LENGTH:
        return False
    lower_key = result.key.lower()
    return not any(word in lower_key for word in NOISY_WORDS)


def validate_results(results: Iterable[ParseResult]) -> List[ParseResult]:
    """Strict-mode filter. Rejected entries are dropped without a trace."""
    return [r for r in results if is_valid(r)]
