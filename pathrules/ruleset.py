"""pathrules/ruleset.py – S-expression rule sets.

Reads a rule-set document with ``sexpdata`` and registers the actions it
describes on a :class:`~pathrules.registry.PatternRegistry`, in document
order.

Surface syntax
--------------
::

    (ruleset   FORM ...)                    optional outer wrapper
    (create    PATTERN TYPE)                CreateAction
    (link      PATTERN METHOD TYPE)         LinkAction, relaxed
    (link      PATTERN METHOD TYPE exact)   LinkAction, exact
    (namespace URI FORM ...)                namespace filter for FORMs

Strings may be written as string literals or bare symbols; ``t`` and
``nil`` are read as plain symbols too.  Example::

    (create "library" "myapp.model.Library")
    (namespace "urn:books"
      (create "*/book" "myapp.model.Book")
      (link   "*/book" "add_book" "myapp.model.Book" exact))
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

try:
    import sexpdata
    from sexpdata import Symbol
except ImportError:  # pragma: no cover – allow static analysis w/o dep
    raise ImportError(
        "The 'sexpdata' package is required for rule sets. "
        "Install it with:  pip install sexpdata"
    )

from pathrules.actions import CreateAction
from pathrules.errors import RuleSetError
from pathrules.linking import LinkAction
from pathrules.registry import PatternRegistry

__all__ = [
    "load_ruleset",
    "load_ruleset_file",
]

Sexp = Any


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _sym_name(s: Sexp) -> Optional[str]:
    if isinstance(s, Symbol):
        value = getattr(s, "value", None)
        return value() if callable(value) else str(s)
    return None


def _render(s: Sexp) -> str:
    """Render a parsed form back to text for error messages."""
    if isinstance(s, list):
        return "(" + " ".join(_render(x) for x in s) + ")"
    name = _sym_name(s)
    if name is not None:
        return name
    if isinstance(s, str):
        return f"\"{s}\""
    return str(s)


def _as_str(s: Sexp, what: str, form: Sexp) -> str:
    name = _sym_name(s)
    if name is not None:
        return name
    if isinstance(s, str):
        return s
    raise RuleSetError(f"{what} must be a string, got {s!r}", _render(form))


def _head(form: Sexp) -> str:
    if not isinstance(form, list) or not form:
        raise RuleSetError("expected a (tag ...) form", _render(form))
    name = _sym_name(form[0])
    if name is None:
        raise RuleSetError("form must start with a symbol", _render(form))
    return name


# ---------------------------------------------------------------------------
# Form handlers
# ---------------------------------------------------------------------------

_Handler = Callable[[list, PatternRegistry, Optional[str]], None]
_DISPATCH: Dict[str, _Handler] = {}


def _register(tag: str):
    """Decorator: register a form handler under *tag*."""
    def deco(fn: _Handler) -> _Handler:
        _DISPATCH[tag] = fn
        return fn
    return deco


def _apply(form: Sexp, registry: PatternRegistry, namespace: Optional[str]) -> None:
    tag = _head(form)
    handler = _DISPATCH.get(tag)
    if handler is None:
        raise RuleSetError(f"unknown form ({tag} ...)", _render(form))
    handler(form, registry, namespace)


@_register("ruleset")
def _ruleset(form: list, registry: PatternRegistry, namespace: Optional[str]) -> None:
    for item in form[1:]:
        _apply(item, registry, namespace)


@_register("namespace")
def _namespace(form: list, registry: PatternRegistry, namespace: Optional[str]) -> None:
    if len(form) < 2:
        raise RuleSetError("namespace needs a URI", _render(form))
    uri = _as_str(form[1], "namespace URI", form)
    for item in form[2:]:
        _apply(item, registry, uri)


@_register("create")
def _create(form: list, registry: PatternRegistry, namespace: Optional[str]) -> None:
    if len(form) != 3:
        raise RuleSetError("create takes PATTERN TYPE", _render(form))
    pattern = _as_str(form[1], "pattern", form)
    type_name = _as_str(form[2], "type", form)
    registry.add(pattern, CreateAction(type_name, namespace=namespace))


@_register("link")
def _link(form: list, registry: PatternRegistry, namespace: Optional[str]) -> None:
    if len(form) not in (4, 5):
        raise RuleSetError("link takes PATTERN METHOD TYPE [exact]", _render(form))
    pattern = _as_str(form[1], "pattern", form)
    method_name = _as_str(form[2], "method", form)
    param_type = _as_str(form[3], "type", form)
    exact = False
    if len(form) == 5:
        if _sym_name(form[4]) != "exact":
            raise RuleSetError("the only link option is 'exact'", _render(form))
        exact = True
    registry.add(
        pattern,
        LinkAction(method_name, param_type, exact_match=exact, namespace=namespace),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def load_ruleset(text: str, registry: Optional[PatternRegistry] = None) -> PatternRegistry:
    """Register the actions described by *text* and return the registry."""
    if registry is None:
        registry = PatternRegistry()
    # sexpdata reads a single form; wrap to accept a sequence of them
    try:
        forms: List[Sexp] = sexpdata.loads(f"({text}\n)", true=None, nil=None)
    except Exception as exc:
        raise RuleSetError(f"malformed rule set: {exc}") from exc
    for form in forms:
        _apply(form, registry, None)
    return registry


def load_ruleset_file(
    path: Union[str, Path], registry: Optional[PatternRegistry] = None
) -> PatternRegistry:
    text = Path(path).read_text(encoding="utf-8")
    return load_ruleset(text, registry)
