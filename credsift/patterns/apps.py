from __future__ import annotations
import re
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence

from ..core.models import ParseResult

FALLBACK_APP_NAME = "General"
KEY_PREFIX_RE = re.compile(r"^([A-Z]+)_")
MIN_PREFIX_LENGTH = 2


@dataclass(frozen=True)
class AppContext:
    name: str
    patterns: Sequence[re.Pattern]

    def matches(self, *texts: str) -> bool:
        return any(rx.search(t) for rx in self.patterns for t in texts)


def _ctx(name: str, *patterns: str) -> AppContext:
    return AppContext(name, tuple(re.compile(p, re.IGNORECASE) for p in patterns))


# Order matters: the first matching context names the app.
APP_CONTEXTS: List[AppContext] = [
    _ctx("AWS", r"aws|amazon", r"bucket|s3|lambda"),
    _ctx("Azure", r"azure|microsoft"),
    _ctx("GCP", r"gcp|google.cloud", r"firebase"),
    _ctx("Stripe", r"stripe|payment"),
    _ctx("Email", r"sendgrid|mail|smtp"),
    _ctx("Database", r"postgres|pg|database|db", r"mysql|mariadb"),
    _ctx("Cache", r"redis|cache"),
    _ctx("Auth", r"jwt|auth|oauth|secret"),
    _ctx("API", r"api[_-]?key|token"),
    _ctx("Integrations", r"slack|discord|webhook"),
]


def _first_context(contexts: Iterable[AppContext], *texts: str) -> Optional[str]:
    for context in contexts:
        if context.matches(*texts):
            return context.name
    return None


def _resolve(result: ParseResult, contexts: Sequence[AppContext], source_app: Optional[str]) -> str:
    name = _first_context(contexts, result.key.lower(), result.value.lower()) or source_app
    if name is not None:
        return name

    m = KEY_PREFIX_RE.match(result.key)
    if m and len(m.group(1)) >= MIN_PREFIX_LENGTH:
        return m.group(1)
    return FALLBACK_APP_NAME


def infer_app_name(
    result: ParseResult,
    source_text: str,
    contexts: Sequence[AppContext] = APP_CONTEXTS,
) -> str:
    """Best guess at the service a credential belongs to.

    The context table is tried against the entry's own key and value before
    the whole source text, so a file mixing ``DB_HOST`` and ``API_KEY`` still
    labels the API key ``API``. Keys with an upper-case prefix such as
    ``TWILIO_SID`` fall back to the prefix, everything else is ``General``.
    """

    return _resolve(result, contexts, _first_context(contexts, source_text.lower()))


def infer_app_names(
    results: Iterable[ParseResult],
    source_text: str,
    contexts: Sequence[AppContext] = APP_CONTEXTS,
) -> List[ParseResult]:
    out: List[ParseResult] = []
    # same answer for every entry
    source_app = _first_context(contexts, source_text.lower())
    for r in results:
        if r.app_name:
            out.append(r)
        else:
            out.append(replace(r, app_name=_resolve(r, contexts, source_app)))
    return out
