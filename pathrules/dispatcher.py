#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
pathrules/dispatcher.py
=======================

Reference traversal driver: walks an XML document with :mod:`xml.sax`
and fires the registered actions.

For every element the dispatcher

1. extends the current path (``"library"`` → ``"library/book"``),
2. asks the registry once for the actions matching that path and the
   element's namespace,
3. fires ``begin`` on each of them in that order,
4. on close fires ``body`` with the collected text, then ``end``, again in
   that order,
5. discards whatever the element's actions left on the object stack.

Exceptions raised by actions are not caught; they abort the parse.

The ``start_element`` / ``text`` / ``end_element`` methods are public so
that other event sources (an ``ElementTree`` walk, a JSON reader) can
drive the same machinery.
"""

from __future__ import annotations

import io
import logging
import xml.sax
import xml.sax.handler
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from pathrules.actions import Action
from pathrules.config import DispatcherConfig
from pathrules.context import TraversalContext, TypeResolver
from pathrules.errors import ConfigError
from pathrules.registry import PatternRegistry

__all__ = ["Dispatcher"]

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    """One open element."""
    path: str
    namespace: str
    name: str
    actions: List[Action]
    depth: int
    text: List[str] = field(default_factory=list)


class Dispatcher(xml.sax.handler.ContentHandler):
    """Drive a :class:`PatternRegistry` from SAX events.

    The registry is bound to this dispatcher's context for as long as the
    dispatcher is in use.  Run parses one after another, never
    concurrently.
    """

    def __init__(
        self,
        registry: PatternRegistry,
        config: Optional[DispatcherConfig] = None,
        resolver: Optional[TypeResolver] = None,
    ) -> None:
        super().__init__()
        self.registry = registry
        self.config = config if config is not None else DispatcherConfig()
        problems = self.config.validate()
        if problems:
            raise ConfigError("; ".join(problems))
        self.resolver = resolver if resolver is not None else TypeResolver()
        self.context = self._new_context()
        self._frames: List[_Frame] = []
        self._root: Any = None

    def _new_context(self) -> TraversalContext:
        context = TraversalContext(self.resolver, trace_code=self.config.trace_code)
        self.registry.bind(context)
        return context

    # ------------------------------------------------------------------
    #  Entry points
    # ------------------------------------------------------------------

    def parse(self, source: Any, root: Any = None) -> Any:
        """Walk *source* (path, URL or file object) and return the root.

        The root is *root* when given, otherwise the first object pushed
        onto the empty stack.
        """
        self.reset(root)
        parser = xml.sax.make_parser()
        parser.setFeature(xml.sax.handler.feature_namespaces,
                          self.config.namespace_aware)
        parser.setFeature(xml.sax.handler.feature_external_ges,
                          self.config.external_entities)
        parser.setContentHandler(self)
        parser.parse(source)
        return self._root

    def parse_string(self, text: Union[str, bytes], root: Any = None) -> Any:
        stream = io.BytesIO(text) if isinstance(text, bytes) else io.StringIO(text)
        return self.parse(stream, root)

    def reset(self, root: Any = None) -> None:
        """Start afresh: new context (and trace), empty stack, *root* pushed."""
        self.context = self._new_context()
        self._frames = []
        self._root = root
        if root is not None:
            self.context.push(root)

    def generated_code(self) -> List[str]:
        """Trace lines of the last parse (empty unless ``trace_code``)."""
        return list(self.context.generated_code or [])

    # ------------------------------------------------------------------
    #  Driver-neutral events
    # ------------------------------------------------------------------

    def start_element(
        self, namespace: str, name: str, attributes: Mapping[str, str]
    ) -> None:
        parent = self._frames[-1].path if self._frames else ""
        path = f"{parent}/{name}" if parent else name
        context = self.context
        context.match = path
        context.namespace = namespace

        actions = self.registry.match(namespace, path)
        if actions:
            logger.debug("{%s} %d action(s) matched", path, len(actions))
        frame = _Frame(path, namespace, name, actions, context.depth)
        self._frames.append(frame)

        was_empty = context.depth == 0
        for action in actions:
            action.begin(context, namespace, name, attributes)
        if was_empty and self._root is None and context.depth > 0:
            self._root = context.peek(context.depth - 1)

    def text(self, content: str) -> None:
        if self._frames:
            self._frames[-1].text.append(content)

    def end_element(self) -> None:
        frame = self._frames.pop()
        context = self.context
        context.match = frame.path
        context.namespace = frame.namespace

        body = "".join(frame.text)
        if self.config.trim_body:
            body = body.strip()
        for action in frame.actions:
            action.body(context, frame.namespace, frame.name, body)
        for action in frame.actions:
            action.end(context, frame.namespace, frame.name)

        context.unwind(frame.depth)
        if self._frames:
            context.match = self._frames[-1].path
            context.namespace = self._frames[-1].namespace
        else:
            context.match = ""
            context.namespace = ""

    # ------------------------------------------------------------------
    #  SAX ContentHandler
    # ------------------------------------------------------------------

    def startElement(self, name: str, attrs: Any) -> None:
        self.start_element("", name, dict(attrs.items()))

    def endElement(self, name: str) -> None:
        self.end_element()

    def startElementNS(self, name: Any, qname: Optional[str], attrs: Any) -> None:
        uri, local = name
        attributes: Dict[str, str] = {key[1]: value for key, value in attrs.items()}
        self.start_element(uri or "", local, attributes)

    def endElementNS(self, name: Any, qname: Optional[str]) -> None:
        self.end_element()

    def characters(self, content: str) -> None:
        self.text(content)
