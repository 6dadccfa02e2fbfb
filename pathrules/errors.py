# pathrules/errors.py
"""
Exception hierarchy for the pathrules engine.

Hierarchy
─────────
    PathRulesError (base)
    ├── InvocationError      - an action failed to resolve or call a method
    ├── TypeResolutionError  - a type descriptor names no importable type
    ├── RuleSetError         - a rule-set document is malformed
    └── ConfigError          - invalid dispatcher configuration

Lookup misses are not errors: ``PatternRegistry.match`` returns an empty
list.  Patterns themselves are never validated.
"""

from __future__ import annotations

from typing import Any, Optional

__all__ = [
    "PathRulesError",
    "InvocationError",
    "TypeResolutionError",
    "RuleSetError",
    "ConfigError",
]


class PathRulesError(Exception):
    """Base exception for all pathrules errors."""
    pass


class InvocationError(PathRulesError):
    """Raised when an action cannot invoke its target method.

    Covers a missing method, a signature the argument does not fit, a
    ``None`` target and any exception raised by the target method itself
    (available as ``__cause__``).
    """

    def __init__(
        self,
        message: str,
        *,
        method_name: Optional[str] = None,
        target: Any = None,
    ) -> None:
        super().__init__(message)
        self.method_name = method_name
        self.target = target


class TypeResolutionError(PathRulesError):
    """Raised when a type descriptor cannot be resolved to a type."""

    def __init__(self, descriptor: str, reason: str = "") -> None:
        msg = f"cannot resolve type {descriptor!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
        self.descriptor = descriptor


class RuleSetError(PathRulesError):
    """Raised when a rule-set document cannot be turned into actions."""

    def __init__(self, message: str, form: Optional[str] = None) -> None:
        super().__init__(message if form is None else f"{message} in {form}")
        self.form = form


class ConfigError(PathRulesError):
    """Raised for unknown or ill-typed configuration values."""
    pass
