#!/usr/bin/env python3
# =============================================================================
#  pathrules — setup.py  (legacy compatibility shim)
#
#  All authoritative metadata lives in pyproject.toml.
#  This file exists so that:
#
#    1.  `pip install -e .` works on older pip / setuptools that pre-date
#        PEP 660 editable installs.
#    2.  `python setup.py sdist bdist_wheel` still works for CI scripts
#        that haven't migrated to `python -m build`.
#
#  For new tooling, prefer:
#      pip install -e ".[dev]"
#      python -m build
#      python -m pytest
# =============================================================================

from __future__ import annotations

from setuptools import setup

# ---------------------------------------------------------------------------
#  Name, version, dependencies, packages and the `pathrules` console script
#  are read from pyproject.toml.  Only options pyproject.toml cannot
#  express belong here.
# ---------------------------------------------------------------------------
setup(
    zip_safe=False,
)
