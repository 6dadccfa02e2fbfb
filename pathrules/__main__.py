#!/usr/bin/env python3
"""pathrules/__main__.py — command-line entry point.

Usage examples
--------------
    # List the actions a rule set registers, in registration order
    python -m pathrules rules library.rules

    # Show which actions apply to a path
    python -m pathrules match library.rules library/shelf/book --namespace urn:books

    # Walk a document and print what the actions did
    python -m pathrules trace library.rules catalogue.xml --root myapp.model.Catalogue

Exit codes
----------
    0   Success.
    1   An action failed while the document was walked.
    2   Infrastructure failure (missing file, bad rule set, bad XML, ...).
"""

from __future__ import annotations

import argparse
import logging
import sys
import xml.sax
from pathlib import Path
from typing import Optional, Sequence, TextIO

from pathrules import __version__
from pathrules.config import DispatcherConfig
from pathrules.dispatcher import Dispatcher
from pathrules.errors import InvocationError, PathRulesError
from pathrules.registry import PatternRegistry
from pathrules.ruleset import load_ruleset_file

_log = logging.getLogger("pathrules")

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the ``pathrules`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("pathrules")
    root.setLevel(level)
    root.addHandler(handler)


def _resolve_path(raw: str, label: str = "file") -> Path:
    """Resolve *raw* to an absolute ``Path``, raising on missing files."""
    p = Path(raw).expanduser().resolve()
    if not p.exists():
        _log.error("%s not found: %s", label, p)
        raise SystemExit(EXIT_INFRA)
    return p


def _load(raw: str) -> PatternRegistry:
    path = _resolve_path(raw, "rule set")
    try:
        return load_ruleset_file(path)
    except PathRulesError as exc:
        _log.error("%s: %s", path, exc)
        raise SystemExit(EXIT_INFRA)


# ===========================================================================
# Sub-commands
# ===========================================================================

def cmd_rules(args: argparse.Namespace, out: TextIO) -> int:
    registry = _load(args.ruleset)
    for index, (pattern, action) in enumerate(registry.entries(), 1):
        ns = f"  [{action.namespace}]" if action.namespace is not None else ""
        out.write(f"{index:3d}  {pattern or '<empty>'}  {action!r}{ns}\n")
    _log.info("%d rule(s) over %d pattern(s)", len(registry), len(registry.patterns()))
    return EXIT_OK


def cmd_match(args: argparse.Namespace, out: TextIO) -> int:
    registry = _load(args.ruleset)
    actions = registry.match(args.namespace, args.path)
    if not actions:
        out.write(f"no actions for {args.path}\n")
    for action in actions:
        out.write(f"{action!r}\n")
    return EXIT_OK


def cmd_trace(args: argparse.Namespace, out: TextIO) -> int:
    registry = _load(args.ruleset)
    document = _resolve_path(args.document, "document")
    config = DispatcherConfig(
        namespace_aware=not args.no_namespaces,
        trace_code=True,
    )
    dispatcher = Dispatcher(registry, config)
    root = None
    if args.root:
        try:
            root_type = dispatcher.resolver.resolve(args.root)
        except PathRulesError as exc:
            _log.error("%s", exc)
            return EXIT_INFRA
        try:
            root = root_type()
        except Exception as exc:
            _log.error("cannot instantiate %s: %s: %s",
                       root_type.__qualname__, type(exc).__name__, exc)
            return EXIT_INFRA
    try:
        dispatcher.parse(str(document), root=root)
    except InvocationError as exc:
        _log.error("{%s} %s", dispatcher.context.match, exc)
        return EXIT_ERROR
    except xml.sax.SAXParseException as exc:
        _log.error("%s", exc)
        return EXIT_INFRA
    except PathRulesError as exc:
        _log.error("{%s} %s", dispatcher.context.match, exc)
        return EXIT_INFRA
    finally:
        for line in dispatcher.generated_code():
            out.write(line + "\n")
    return EXIT_OK


# ===========================================================================
# Argument parser
# ===========================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pathrules",
        description="Pattern-driven actions over XML element paths.",
    )
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="increase log verbosity (-v info, -vv debug)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_rules = sub.add_parser("rules", help="list registered actions")
    p_rules.add_argument("ruleset", help="S-expression rule-set file")
    p_rules.set_defaults(func=cmd_rules)

    p_match = sub.add_parser("match", help="show the actions matching a path")
    p_match.add_argument("ruleset", help="S-expression rule-set file")
    p_match.add_argument("path", help="element path, e.g. library/shelf/book")
    p_match.add_argument("--namespace", default=None,
                         help="namespace URI of the element")
    p_match.set_defaults(func=cmd_match)

    p_trace = sub.add_parser("trace", help="walk a document and print the call trace")
    p_trace.add_argument("ruleset", help="S-expression rule-set file")
    p_trace.add_argument("document", help="XML document")
    p_trace.add_argument("--root", default=None,
                         help="type to instantiate and push before parsing")
    p_trace.add_argument("--no-namespaces", action="store_true",
                         help="match on qualified names, ignore namespaces")
    p_trace.set_defaults(func=cmd_trace)

    return parser


def main(argv: Optional[Sequence[str]] = None, out: Optional[TextIO] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    _configure_logging(args.verbose)
    try:
        return args.func(args, out if out is not None else sys.stdout)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_INFRA


if __name__ == "__main__":
    sys.exit(main())
