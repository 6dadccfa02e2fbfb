#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
pathrules/context.py
====================

Shared state visible to actions while a tree is being walked.

Provides:
- ``TypeResolver`` — turns type descriptors (``"pkg.mod.Name"``) into types
- ``TraversalContext`` — object stack, current path/namespace, resolver and
  the optional code-trace sink
"""

from __future__ import annotations

import builtins
import importlib
import logging
from typing import Any, Dict, List, Optional, Tuple

from pathrules.errors import TypeResolutionError

__all__ = [
    "TypeResolver",
    "TraversalContext",
]

logger = logging.getLogger(__name__)


class TypeResolver:
    """Resolve type descriptor strings to live types.

    Lookup order is: registered aliases, builtin names, then a dotted path
    ``"package.module.Outer.Inner"`` imported with :mod:`importlib`.  The
    longest importable module prefix is used and the remaining components
    are walked as attributes.  Successful lookups are cached.
    """

    def __init__(self) -> None:
        self._aliases: Dict[str, type] = {}
        self._cache: Dict[str, type] = {}

    def register(self, name: str, cls: type) -> None:
        """Make *cls* resolvable under *name*."""
        if not isinstance(cls, type):
            raise TypeError(f"expected a type, got {type(cls).__name__}")
        self._aliases[name] = cls
        self._cache.pop(name, None)

    def resolve(self, descriptor: str) -> type:
        cached = self._cache.get(descriptor)
        if cached is not None:
            return cached
        cls = self._lookup(descriptor)
        self._cache[descriptor] = cls
        return cls

    def _lookup(self, descriptor: str) -> type:
        if not descriptor:
            raise TypeResolutionError(descriptor, "empty descriptor")
        if descriptor in self._aliases:
            return self._aliases[descriptor]

        if "." not in descriptor:
            obj = getattr(builtins, descriptor, None)
            if isinstance(obj, type):
                return obj
            raise TypeResolutionError(descriptor, "not a builtin type")

        parts = descriptor.split(".")
        module = None
        split = len(parts)
        while split > 0:
            module_name = ".".join(parts[:split])
            try:
                module = importlib.import_module(module_name)
                break
            except ModuleNotFoundError as exc:
                # only keep searching if the missing module is the one asked for
                if exc.name is not None and not module_name.startswith(exc.name):
                    raise TypeResolutionError(descriptor, str(exc)) from exc
                split -= 1
        if module is None:
            raise TypeResolutionError(descriptor, "no importable module prefix")

        obj: Any = module
        for attr in parts[split:]:
            try:
                obj = getattr(obj, attr)
            except AttributeError as exc:
                raise TypeResolutionError(
                    descriptor, f"{attr!r} not found in {obj!r}"
                ) from exc
        if not isinstance(obj, type):
            raise TypeResolutionError(
                descriptor, f"resolves to {type(obj).__name__}, not a type"
            )
        return obj


class TraversalContext:
    """State shared between a traversal driver and its actions.

    The object stack is LIFO; ``peek(0)`` is the object associated with the
    innermost open element and ``peek(1)`` the one enclosing it.  Reading
    past the bottom of the stack logs a warning and yields ``None``.

    When *trace_code* is true, ``generated_code`` is an append-only list
    of lines describing what the actions did, with objects named through
    :meth:`to_variable_name`.
    """

    def __init__(
        self,
        resolver: Optional[TypeResolver] = None,
        trace_code: bool = False,
    ) -> None:
        self.resolver = resolver if resolver is not None else TypeResolver()
        self.match: str = ""
        self.namespace: str = ""
        self.generated_code: Optional[List[str]] = [] if trace_code else None
        self._stack: List[Any] = []
        self._aliases: Dict[int, Tuple[Any, str]] = {}
        self._alias_counts: Dict[str, int] = {}

    # --- object stack ---

    def push(self, obj: Any) -> None:
        self._stack.append(obj)

    def pop(self) -> Any:
        if not self._stack:
            logger.warning("pop() on an empty object stack")
            return None
        return self._stack.pop()

    def peek(self, depth: int = 0) -> Any:
        """Return the object *depth* levels below the top, or ``None``."""
        if depth < 0 or depth >= len(self._stack):
            logger.warning(
                "peek(%d) beyond object stack of size %d", depth, len(self._stack)
            )
            return None
        return self._stack[-1 - depth]

    @property
    def depth(self) -> int:
        return len(self._stack)

    def unwind(self, depth: int) -> None:
        """Discard objects until the stack holds at most *depth* entries."""
        del self._stack[depth:]

    def clear(self) -> None:
        """Reset stack and position; aliases and the trace survive."""
        self._stack.clear()
        self.match = ""
        self.namespace = ""

    # --- code tracing ---

    @property
    def tracing(self) -> bool:
        return self.generated_code is not None

    def emit(self, line: str) -> None:
        if self.generated_code is not None:
            self.generated_code.append(line)

    def to_variable_name(self, obj: Any) -> str:
        """Return a stable identifier for *obj*, e.g. ``book_2``."""
        if obj is None:
            return "None"
        entry = self._aliases.get(id(obj))
        if entry is not None and entry[0] is obj:
            return entry[1]
        base = type(obj).__name__.lower()
        count = self._alias_counts.get(base, 0) + 1
        self._alias_counts[base] = count
        alias = f"{base}_{count}"
        # keep obj alive so its id() cannot be reused by another object
        self._aliases[id(obj)] = (obj, alias)
        return alias
