from __future__ import annotations
import importlib
import pkgutil
from typing import Dict, Type

from ..parsers.base import ParserPlugin

FALLBACK_PARSER = "text"


def _discover_package_classes(pkg, base_cls) -> Dict[str, Type]:
    discovered: Dict[str, Type] = {}
    for m in pkgutil.iter_modules(pkg.__path__, pkg.__name__ + "."):
        module = importlib.import_module(m.name)
        for attr_name in dir(module):
            obj = getattr(module, attr_name)
            if isinstance(obj, type) and issubclass(obj, base_cls) and obj is not base_cls:
                name = getattr(obj, "NAME", obj.__name__).lower()
                discovered[name] = obj
    return discovered


def discover_parser_plugins() -> Dict[str, ParserPlugin]:
    from .. import parsers as parsers_pkg  # lazy import
    classes = _discover_package_classes(parsers_pkg, ParserPlugin)
    # Instantiate
    return {name: cls() for name, cls in classes.items()}


def choose_parser(parser_plugins: Dict[str, ParserPlugin], fmt: str) -> ParserPlugin:
    plugin = parser_plugins.get(fmt)
    if plugin is not None:
        return plugin
    # unknown formats go to the loose text scan
    return parser_plugins[FALLBACK_PARSER]
