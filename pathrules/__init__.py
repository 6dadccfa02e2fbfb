"""pathrules — pattern-driven actions for hierarchical event streams.

While a tree-shaped document is walked depth-first, every element path
(``"library/shelf/book"``) is matched against registered patterns and the
matching actions fire on element begin, body and end.

Submodules
----------
registry
    ``PatternRegistry``: ordered registration, exact-then-longest-wildcard
    matching, namespace filtering.

actions
    ``Action`` (three optional hook slots) and ``CreateAction``.

linking
    ``LinkAction`` and the ``ExactLinker`` / ``RelaxedLinker`` method
    resolution strategies.

context
    ``TraversalContext`` (object stack, current path, code trace) and
    ``TypeResolver``.

dispatcher
    ``Dispatcher``: an ``xml.sax`` driver feeding a registry.

ruleset
    S-expression rule-set loader.

Usage
-----
Programmatic::

    from pathrules import Dispatcher, LinkAction, CreateAction, PatternRegistry

    registry = PatternRegistry()
    registry.add("library", CreateAction("myapp.model.Library"))
    registry.add("*/book", CreateAction("myapp.model.Book"))
    registry.add("*/book", LinkAction("add_book", "myapp.model.Book"))
    library = Dispatcher(registry).parse("catalogue.xml")

Command-line::

    python -m pathrules trace library.rules catalogue.xml
"""

from __future__ import annotations

__version__: str = "0.1.0"

from pathrules.actions import Action, CreateAction
from pathrules.config import DispatcherConfig
from pathrules.context import TraversalContext, TypeResolver
from pathrules.dispatcher import Dispatcher
from pathrules.errors import (
    ConfigError,
    InvocationError,
    PathRulesError,
    RuleSetError,
    TypeResolutionError,
)
from pathrules.linking import ExactLinker, LinkAction, LinkMode, RelaxedLinker, linker_for
from pathrules.registry import PatternRegistry, normalize_pattern

__all__: list[str] = [
    "__version__",
    "Action",
    "CreateAction",
    "ConfigError",
    "Dispatcher",
    "DispatcherConfig",
    "ExactLinker",
    "InvocationError",
    "LinkAction",
    "LinkMode",
    "PathRulesError",
    "PatternRegistry",
    "RelaxedLinker",
    "RuleSetError",
    "TraversalContext",
    "TypeResolutionError",
    "TypeResolver",
    "linker_for",
    "normalize_pattern",
]
