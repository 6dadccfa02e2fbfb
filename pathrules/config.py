# pathrules/config.py
"""Configuration for :class:`pathrules.dispatcher.Dispatcher`."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, List, Mapping

from pathrules.errors import ConfigError

__all__ = ["DispatcherConfig"]


@dataclass
class DispatcherConfig:
    """Tuning knobs for a traversal.

    namespace_aware
        Parse with XML namespace processing; element paths use local names
        and actions see the namespace URI.  Otherwise qualified names are
        used and the namespace is always ``""``.
    trim_body
        Strip leading/trailing whitespace from element text before the
        body hooks see it.
    trace_code
        Record a line-per-call trace of what the actions did.
    external_entities
        Let the SAX parser fetch external general entities.  Off unless
        the documents are trusted.
    """
    namespace_aware: bool = True
    trim_body: bool = True
    trace_code: bool = False
    external_entities: bool = False

    def validate(self) -> List[str]:
        """Return a list of validation warnings (empty if valid)."""
        warnings: List[str] = []
        for f in fields(self):
            if not isinstance(getattr(self, f.name), bool):
                warnings.append(f"{f.name} must be a bool")
        return warnings

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "DispatcherConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")
        config = cls(**values)
        problems = config.validate()
        if problems:
            raise ConfigError("; ".join(problems))
        return config
