#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
pathrules/registry.py
=====================

Pattern registry: which actions apply to a nesting path.

Patterns are ``/``-separated element paths.  Two forms exist:

- exact, e.g. ``"library/shelf/book"``
- tail-wildcard, e.g. ``"*/shelf/book"``, matching any path that ends in
  ``shelf/book`` (or is exactly ``shelf/book``)

Selection rules for :meth:`PatternRegistry.match`:

1. Actions registered under exactly the queried path win outright.
2. Only when that yields nothing are tail-wildcard patterns considered;
   the longest matching wildcard pattern is used.  Among matching
   wildcard patterns of equal length, the one registered first wins.
3. Within the chosen pattern, actions come back in registration order,
   filtered by namespace when a namespace is given.

Usage::

    registry = PatternRegistry()
    registry.add("library/book", LinkAction("add_book", "myapp.Book"))
    registry.add("*/book/title", Action(on_body=set_title))
    for action in registry.match("", "library/book/title"):
        ...
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from pathrules.actions import Action

if TYPE_CHECKING:
    from pathrules.context import TraversalContext

__all__ = [
    "WILDCARD_PREFIX",
    "normalize_pattern",
    "PatternRegistry",
]

logger = logging.getLogger(__name__)

WILDCARD_PREFIX = "*/"


def normalize_pattern(pattern: str) -> str:
    """Strip one trailing ``/`` from patterns longer than one character."""
    if len(pattern) > 1 and pattern.endswith("/"):
        return pattern[:-1]
    return pattern


class PatternRegistry:
    """Ordered store of actions keyed by pattern.

    Holds two views of the same registrations: the global registration
    order (returned by :meth:`rules`) and a per-pattern bucket map used by
    :meth:`match`.  A registry is bound to at most one
    ``TraversalContext`` at a time; :meth:`bind` replaces the previous
    binding on every registered action.  Sharing one registry between
    overlapping traversals is not supported.
    """

    def __init__(self) -> None:
        self._cache: Dict[str, List[Action]] = {}
        self._entries: List[Tuple[str, Action]] = []
        self._context: Optional["TraversalContext"] = None

    # ------------------------------------------------------------------
    #  Context binding
    # ------------------------------------------------------------------

    @property
    def context(self) -> Optional["TraversalContext"]:
        return self._context

    def bind(self, context: Optional["TraversalContext"]) -> None:
        """Bind this registry, and every registered action, to *context*."""
        if self._context is not None and self._context is not context:
            logger.debug("rebinding registry from %r to %r", self._context, context)
        self._context = context
        for _, action in self._entries:
            action.bind(context)

    # ------------------------------------------------------------------
    #  Registration
    # ------------------------------------------------------------------

    def add(self, pattern: str, action: Action) -> None:
        """Register *action* under *pattern*.

        Repeated patterns and the empty pattern are both accepted; each call
        appends.
        """
        pattern = normalize_pattern(pattern)
        self._cache.setdefault(pattern, []).append(action)
        self._entries.append((pattern, action))
        if self._context is not None:
            action.bind(self._context)
        logger.debug("registered %r for pattern %r", action, pattern)

    def clear(self) -> None:
        self._cache.clear()
        self._entries.clear()

    # ------------------------------------------------------------------
    #  Queries
    # ------------------------------------------------------------------

    def rules(self) -> List[Action]:
        """Return every registered action in registration order."""
        return [action for _, action in self._entries]

    def entries(self) -> List[Tuple[str, Action]]:
        """Return ``(pattern, action)`` pairs in registration order."""
        return list(self._entries)

    def patterns(self) -> List[str]:
        """Return the distinct normalized patterns, first registration first."""
        return list(self._cache)

    def match(self, namespace: Optional[str], pattern: str) -> List[Action]:
        """Return the actions that apply to *pattern* in *namespace*.

        *namespace* ``None`` or ``""`` disables namespace filtering.  The
        result is a fresh list; an empty list means nothing applies.
        """
        candidates = self._lookup(namespace, pattern)
        if not candidates:
            best_key = ""
            for key in self._cache:
                if not key.startswith(WILDCARD_PREFIX):
                    continue
                if pattern == key[2:] or pattern.endswith(key[1:]):
                    # strictly longer only, so the first-registered key keeps ties
                    if len(key) > len(best_key):
                        candidates = self._lookup(namespace, key)
                        best_key = key
            if best_key:
                logger.debug("pattern %r resolved through %r", pattern, best_key)
        return candidates if candidates is not None else []

    def _lookup(self, namespace: Optional[str], pattern: str) -> Optional[List[Action]]:
        """Return the bucket for *pattern* filtered by *namespace*.

        ``None`` when nothing was ever registered under *pattern*.
        """
        bucket = self._cache.get(pattern)
        if bucket is None:
            return None
        if not namespace:
            return list(bucket)
        return [
            action for action in bucket
            if action.namespace is None or action.namespace == namespace
        ]

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"PatternRegistry(patterns={len(self._cache)}, rules={len(self._entries)})"
