#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
pathrules/linking.py
====================

Parent/child linking: when an element closes, hand the object on top of
the stack to a method of the object beneath it.

Method resolution is delegated to a ``Linker``.  Two strategies ship:

``ExactLinker``
    The target method must declare its single parameter as exactly the
    type named by the descriptor.  A method annotated with a base class
    of that type does not qualify.

``RelaxedLinker``
    Any method the child can be passed to qualifies: unannotated
    parameters accept anything, ``Optional``/``Union`` accept any member.
    ``functools.singledispatchmethod`` targets dispatch to the most
    specific implementation registered for the child's type.

Both raise :class:`~pathrules.errors.InvocationError` when no method
qualifies or when the method itself raises.
"""

from __future__ import annotations

import enum
import functools
import inspect
import logging
import types
import typing
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Protocol, Tuple

from pathrules.actions import Action
from pathrules.errors import InvocationError, TypeResolutionError

if TYPE_CHECKING:
    from pathrules.context import TraversalContext, TypeResolver

__all__ = [
    "LinkMode",
    "Linker",
    "ExactLinker",
    "RelaxedLinker",
    "linker_for",
    "LinkAction",
]

logger = logging.getLogger(__name__)

_EMPTY = inspect.Parameter.empty


class LinkMode(enum.Enum):
    """Method-resolution strictness for parent/child links."""
    EXACT = "exact"
    RELAXED = "relaxed"


class Linker(Protocol):
    mode: LinkMode

    def link(
        self,
        parent: Any,
        method_name: str,
        child: Any,
        param_type: str,
        resolver: "TypeResolver",
    ) -> Any: ...


# ---------------------------------------------------------------------------
# Introspection helpers
# ---------------------------------------------------------------------------

def _single_parameter(func: Callable) -> Tuple[Optional[str], Any]:
    """Return ``(name, annotation)`` of the one argument *func* takes.

    *func* must be bound (``self`` already applied).  Raises ``TypeError``
    when the signature cannot take exactly one positional argument.
    """
    sig = inspect.signature(func)
    positional = [
        p for p in sig.parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    ]
    variadic = any(p.kind is p.VAR_POSITIONAL for p in sig.parameters.values())
    required = [p for p in positional if p.default is _EMPTY]
    if len(required) > 1 or (not positional and not variadic):
        raise TypeError(f"{func!r} does not take a single argument")
    if not positional:
        return None, _EMPTY
    param = positional[0]
    try:
        hints = typing.get_type_hints(func)
    except (NameError, TypeError) as exc:
        # forward reference the defining module cannot resolve
        logger.debug("cannot evaluate annotations of %r: %s", func, exc)
        hints = {}
    return param.name, hints.get(param.name, param.annotation)


def _accepts(annotation: Any, value: Any) -> bool:
    """Whether *value* may be passed where *annotation* is declared."""
    if annotation is _EMPTY or annotation is Any or annotation is object:
        return True
    if isinstance(annotation, str):
        # unresolved forward reference
        return True
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is getattr(types, "UnionType", None):
        return any(_accepts(arg, value) for arg in typing.get_args(annotation))
    if origin is not None:
        return isinstance(value, origin) if isinstance(origin, type) else True
    if annotation is None or annotation is type(None):
        return value is None
    if isinstance(annotation, type):
        return isinstance(value, annotation)
    return True


def _dispatcher_of(parent: Any, method_name: str) -> Any:
    """Return the ``singledispatch`` dispatcher behind *method_name*, if any."""
    attr = inspect.getattr_static(type(parent), method_name, None)
    if isinstance(attr, functools.singledispatchmethod):
        return attr.dispatcher
    return None


def _describe(obj: Any) -> str:
    return "None" if obj is None else type(obj).__qualname__


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

class _BaseLinker:
    mode: LinkMode

    def link(
        self,
        parent: Any,
        method_name: str,
        child: Any,
        param_type: str,
        resolver: "TypeResolver",
    ) -> Any:
        if parent is None:
            raise InvocationError(
                f"cannot call {method_name}({_describe(child)}) on a None target",
                method_name=method_name,
            )
        try:
            expected = resolver.resolve(param_type)
        except TypeResolutionError as exc:
            raise InvocationError(
                f"{_describe(parent)}.{method_name}: {exc}",
                method_name=method_name,
                target=parent,
            ) from exc
        method = self._resolve(parent, method_name, child, expected)
        try:
            return method(child)
        except Exception as exc:
            raise InvocationError(
                f"{_describe(parent)}.{method_name}({_describe(child)}) raised "
                f"{type(exc).__name__}: {exc}",
                method_name=method_name,
                target=parent,
            ) from exc

    def _resolve(
        self, parent: Any, method_name: str, child: Any, expected: type
    ) -> Callable[[Any], Any]:
        raise NotImplementedError

    def _not_found(self, parent: Any, method_name: str, child: Any,
                   expected: type, detail: str = "") -> InvocationError:
        msg = (
            f"no {self.mode.value} method {_describe(parent)}.{method_name}"
            f"({expected.__qualname__}) for argument {_describe(child)}"
        )
        if detail:
            msg = f"{msg}: {detail}"
        return InvocationError(msg, method_name=method_name, target=parent)

    def _bound(self, parent: Any, method_name: str, child: Any,
               expected: type) -> Callable[..., Any]:
        method = getattr(parent, method_name, None)
        if method is None or not callable(method):
            raise self._not_found(parent, method_name, child, expected,
                                  "no such callable attribute")
        return method

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ExactLinker(_BaseLinker):
    """Call only a method declared for exactly the descriptor type."""

    mode = LinkMode.EXACT

    def _resolve(
        self, parent: Any, method_name: str, child: Any, expected: type
    ) -> Callable[[Any], Any]:
        if not isinstance(child, expected):
            raise self._not_found(parent, method_name, child, expected,
                                  "argument is not an instance of the declared type")
        dispatcher = _dispatcher_of(parent, method_name)
        if dispatcher is not None:
            impl = dispatcher.registry.get(expected)
            if impl is None:
                raise self._not_found(parent, method_name, child, expected,
                                      "no implementation registered for that type")
            return functools.partial(impl, parent)

        method = self._bound(parent, method_name, child, expected)
        try:
            _, annotation = _single_parameter(method)
        except (TypeError, ValueError) as exc:
            raise self._not_found(parent, method_name, child, expected, str(exc)) from exc
        if annotation is not expected:
            detail = ("parameter type is not declared" if annotation is _EMPTY
                      else f"parameter is declared as {annotation!r}")
            raise self._not_found(parent, method_name, child, expected, detail)
        return method


class RelaxedLinker(_BaseLinker):
    """Call any method the child is assignable to."""

    mode = LinkMode.RELAXED

    def _resolve(
        self, parent: Any, method_name: str, child: Any, expected: type
    ) -> Callable[[Any], Any]:
        dispatcher = _dispatcher_of(parent, method_name)
        if dispatcher is not None:
            # most specific registered implementation along the child's MRO
            impl = dispatcher.dispatch(type(child))
            return functools.partial(impl, parent)

        method = self._bound(parent, method_name, child, expected)
        try:
            _, annotation = _single_parameter(method)
        except (TypeError, ValueError) as exc:
            raise self._not_found(parent, method_name, child, expected, str(exc)) from exc
        if not _accepts(annotation, child):
            raise self._not_found(parent, method_name, child, expected,
                                  f"argument does not fit {annotation!r}")
        return method


_LINKERS: Dict[LinkMode, Linker] = {
    LinkMode.EXACT: ExactLinker(),
    LinkMode.RELAXED: RelaxedLinker(),
}


def linker_for(mode: LinkMode) -> Linker:
    return _LINKERS[mode]


# ---------------------------------------------------------------------------
# Action
# ---------------------------------------------------------------------------

class LinkAction(Action):
    """Pass the top stack object to a method of the object below it.

    Parameters
    ----------
    method_name : str
        Name of the method to call on the parent object.
    param_type : str
        Type descriptor of the method's parameter, e.g. ``"myapp.Book"``.
        Resolved lazily through the context's ``TypeResolver``.
    exact_match : bool
        Use :class:`ExactLinker` instead of :class:`RelaxedLinker`.
    namespace : str, optional
        Namespace URI filter.
    linker : Linker, optional
        Custom strategy; when given, *exact_match* is ignored.
    """

    def __init__(
        self,
        method_name: str,
        param_type: str,
        exact_match: bool = False,
        namespace: Optional[str] = None,
        linker: Optional[Linker] = None,
    ) -> None:
        super().__init__(on_end=self._link, namespace=namespace, name="link")
        self.method_name = method_name
        self.param_type = param_type
        self._exact_match = exact_match
        self._linker = linker

    @property
    def exact_match(self) -> bool:
        return self._exact_match

    @exact_match.setter
    def exact_match(self, value: bool) -> None:
        self._exact_match = bool(value)

    @property
    def linker(self) -> Linker:
        if self._linker is not None:
            return self._linker
        return linker_for(LinkMode.EXACT if self._exact_match else LinkMode.RELAXED)

    def _link(self, context: "TraversalContext", namespace: str, name: str) -> None:
        child = context.peek(0)
        parent = context.peek(1)
        if logger.isEnabledFor(logging.DEBUG):
            target = "[NULL PARENT]" if parent is None else type(parent).__qualname__
            logger.debug("{%s} Call %s.%s(%r)", context.match, target,
                         self.method_name, child)

        self.linker.link(parent, self.method_name, child, self.param_type,
                         context.resolver)

        if context.tracing:
            context.emit(
                f"{context.to_variable_name(parent)}.{self.method_name}"
                f"({context.to_variable_name(child)})"
            )

    def __repr__(self) -> str:
        return f"LinkAction[method_name={self.method_name}, param_type={self.param_type}]"
