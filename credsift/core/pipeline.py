from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ..parsers.base import ParserPlugin
from ..patterns.apps import infer_app_names
from ..patterns.noise import validate_results
from .detector import detect_format
from .loader import choose_parser, discover_parser_plugins
from .models import Candidate, ParseResult, ParserOptions
from .utils import preprocess

DEFAULT_LOGGER_NAME = "credsift"

OptionsLike = Union[ParserOptions, Mapping[str, Any], None]


def deduplicate(candidates: Iterable[Candidate]) -> List[ParseResult]:
    """Keep the first candidate per key, in first-seen order."""

    seen = set()
    results: List[ParseResult] = []
    for c in candidates:
        if c.key in seen:
            continue
        seen.add(c.key)
        results.append(ParseResult(key=c.key, value=c.value))
    return results


class CredentialParser:
    """Preprocess, detect, extract, dedupe, then optionally infer and validate.

    Holds only the discovered extractor plugins, which are stateless, so one
    instance can serve any number of callers and threads.
    """

    def __init__(
        self,
        parser_plugins: Optional[Dict[str, ParserPlugin]] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.parser_plugins = parser_plugins if parser_plugins is not None else discover_parser_plugins()
        base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.logger = base_logger.getChild(self.__class__.__name__.lower())

    def parse(self, text: str, options: OptionsLike = None) -> List[ParseResult]:
        return self.parse_with_format(text, options)[1]

    def parse_with_format(self, text: str, options: OptionsLike = None) -> Tuple[str, List[ParseResult]]:
        opts = ParserOptions.coerce(options)
        cleaned = preprocess(text or "")
        fmt = detect_format(cleaned)
        parser = choose_parser(self.parser_plugins, fmt)

        results = deduplicate(parser.extract(cleaned))
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                "Detected format=%s, parser=%s, %d unique key(s)",
                fmt,
                parser.__class__.__name__,
                len(results),
            )

        if opts.infer_app_name:
            results = infer_app_names(results, cleaned)
        if opts.strict_mode:
            kept = validate_results(results)
            if len(kept) != len(results):
                self.logger.debug("Strict mode dropped %d result(s)", len(results) - len(kept))
            results = kept
        return fmt, results


_default_parser: Optional[CredentialParser] = None


def _get_default_parser() -> CredentialParser:
    global _default_parser
    if _default_parser is None:
        _default_parser = CredentialParser()
    return _default_parser


def parse(text: str, options: OptionsLike = None) -> List[ParseResult]:
    """Extract credentials from ``text``. Never raises on malformed input."""

    return _get_default_parser().parse(text, options)


def parse_credentials(text: str, strict: bool = False) -> List[ParseResult]:
    return parse(text, ParserOptions(infer_app_name=True, strict_mode=strict))
