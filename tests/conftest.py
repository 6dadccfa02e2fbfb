"""
Shared fixtures for the pathrules test-suite.
"""

import pytest

from pathrules.context import TraversalContext
from pathrules.registry import PatternRegistry
from tests.models import Book, Library


@pytest.fixture
def registry():
    return PatternRegistry()


@pytest.fixture
def context():
    return TraversalContext(trace_code=True)


@pytest.fixture
def library_stack(context):
    """A context whose stack holds ``[book, library]`` top to bottom."""
    library = Library()
    book = Book()
    context.push(library)
    context.push(book)
    context.match = "library/book"
    return context, library, book


LIBRARY_XML = """<?xml version="1.0"?>
<library name="City">
  <shelf label="A">
    <book><title>Dune</title></book>
    <book><title>Emma</title></book>
  </shelf>
  <book><title>Ulysses</title></book>
  <magazine><title>Wired</title></magazine>
</library>
"""

NAMESPACED_XML = """<?xml version="1.0"?>
<library xmlns="urn:lib" xmlns:m="urn:mag">
  <book><title>Dune</title></book>
  <m:book><title>Wired</title></m:book>
</library>
"""
