#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
pathrules/actions.py
====================

The action contract.

An ``Action`` carries up to three callbacks fired by a traversal driver:

- ``on_begin(context, namespace, name, attributes)`` when a matching
  element opens
- ``on_body(context, namespace, name, text)`` with the element's text
- ``on_end(context, namespace, name)`` when the element closes

Any slot left as ``None`` is a no-op.  The traversal context is handed to
every callback, so an action never needs a stored reference to reach the
object stack.  ``bind`` still records the context an owning registry was
bound to.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Optional, Protocol

from pathrules.errors import InvocationError

if TYPE_CHECKING:
    from pathrules.context import TraversalContext

__all__ = [
    "BeginHook",
    "BodyHook",
    "EndHook",
    "Action",
    "CreateAction",
]

logger = logging.getLogger(__name__)


class BeginHook(Protocol):
    def __call__(
        self,
        context: "TraversalContext",
        namespace: str,
        name: str,
        attributes: Mapping[str, str],
    ) -> Any: ...


class BodyHook(Protocol):
    def __call__(
        self, context: "TraversalContext", namespace: str, name: str, text: str
    ) -> Any: ...


class EndHook(Protocol):
    def __call__(
        self, context: "TraversalContext", namespace: str, name: str
    ) -> Any: ...


@dataclass(eq=False)
class Action:
    """A behavior registered against one or more patterns.

    *namespace* restricts the action to elements in that namespace URI;
    ``None`` matches every namespace.
    """

    on_begin: Optional[BeginHook] = None
    on_body: Optional[BodyHook] = None
    on_end: Optional[EndHook] = None
    namespace: Optional[str] = None
    name: str = ""
    context: Optional["TraversalContext"] = field(
        default=None, repr=False, compare=False
    )

    def bind(self, context: Optional["TraversalContext"]) -> None:
        """Record the context this action is associated with."""
        self.context = context

    def begin(
        self,
        context: "TraversalContext",
        namespace: str,
        name: str,
        attributes: Mapping[str, str],
    ) -> None:
        if self.on_begin is not None:
            self.on_begin(context, namespace, name, attributes)

    def body(
        self, context: "TraversalContext", namespace: str, name: str, text: str
    ) -> None:
        if self.on_body is not None:
            self.on_body(context, namespace, name, text)

    def end(self, context: "TraversalContext", namespace: str, name: str) -> None:
        if self.on_end is not None:
            self.on_end(context, namespace, name)


class CreateAction(Action):
    """Instantiate *type_name* when a matching element opens.

    The new object is pushed on the context's stack.  Popping it again is
    the driver's job once the element closes.
    """

    def __init__(self, type_name: str, namespace: Optional[str] = None) -> None:
        super().__init__(on_begin=self._create, namespace=namespace, name="create")
        self.type_name = type_name

    def _create(
        self,
        context: "TraversalContext",
        namespace: str,
        name: str,
        attributes: Mapping[str, str],
    ) -> None:
        cls = context.resolver.resolve(self.type_name)
        try:
            obj = cls()
        except Exception as exc:
            raise InvocationError(
                f"cannot instantiate {cls.__qualname__}: {type(exc).__name__}: {exc}",
                method_name=cls.__qualname__,
            ) from exc
        logger.debug("{%s} New %s", context.match, cls.__qualname__)
        context.push(obj)
        if context.tracing:
            context.emit(f"{context.to_variable_name(obj)} = {cls.__qualname__}()")

    def __repr__(self) -> str:
        return f"CreateAction[type_name={self.type_name}]"
