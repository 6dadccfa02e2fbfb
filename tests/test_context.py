# tests/test_context.py
"""
Tests for the traversal context and type resolution.
"""

import logging
from collections import OrderedDict

import pytest

from pathrules.context import TraversalContext, TypeResolver
from pathrules.errors import TypeResolutionError
from tests.models import Book, Library, Outer


class TestTypeResolver:

    def test_builtin_names(self):
        resolver = TypeResolver()
        assert resolver.resolve("str") is str
        assert resolver.resolve("object") is object

    def test_dotted_path(self):
        assert TypeResolver().resolve("tests.models.Book") is Book

    def test_stdlib_dotted_path(self):
        assert TypeResolver().resolve("collections.OrderedDict") is OrderedDict

    def test_nested_class(self):
        assert TypeResolver().resolve("tests.models.Outer.Inner") is Outer.Inner

    def test_registered_alias_wins(self):
        resolver = TypeResolver()
        resolver.register("Book", Book)
        resolver.register("str", Library)
        assert resolver.resolve("Book") is Book
        assert resolver.resolve("str") is Library

    def test_register_rejects_non_types(self):
        with pytest.raises(TypeError):
            TypeResolver().register("x", Book())

    @pytest.mark.parametrize("descriptor", [
        "",
        "NoSuchBuiltin",
        "len",
        "no_such_package.Thing",
        "tests.models.Missing",
        "tests.models",
    ])
    def test_unresolvable(self, descriptor):
        with pytest.raises(TypeResolutionError) as info:
            TypeResolver().resolve(descriptor)
        assert info.value.descriptor == descriptor


class TestObjectStack:

    def test_peek_depths(self):
        ctx = TraversalContext()
        ctx.push("parent")
        ctx.push("child")
        assert ctx.peek() == "child"
        assert ctx.peek(0) == "child"
        assert ctx.peek(1) == "parent"
        assert ctx.depth == 2

    def test_peek_past_bottom_returns_none(self, caplog):
        ctx = TraversalContext()
        ctx.push("only")
        with caplog.at_level(logging.WARNING, logger="pathrules.context"):
            assert ctx.peek(1) is None
        assert "peek(1)" in caplog.text

    def test_pop_empty_returns_none(self, caplog):
        ctx = TraversalContext()
        with caplog.at_level(logging.WARNING, logger="pathrules.context"):
            assert ctx.pop() is None
        assert "empty" in caplog.text

    def test_unwind(self):
        ctx = TraversalContext()
        for item in "abcd":
            ctx.push(item)
        ctx.unwind(1)
        assert ctx.depth == 1
        assert ctx.peek() == "a"

    def test_clear_resets_position(self):
        ctx = TraversalContext()
        ctx.push(1)
        ctx.match, ctx.namespace = "a/b", "urn:x"
        ctx.clear()
        assert ctx.depth == 0
        assert (ctx.match, ctx.namespace) == ("", "")


class TestCodeTrace:

    def test_emit_ignored_when_not_tracing(self):
        ctx = TraversalContext()
        ctx.emit("x")
        assert not ctx.tracing
        assert ctx.generated_code is None

    def test_emit_appends_when_tracing(self, context):
        context.emit("a")
        context.emit("b")
        assert context.generated_code == ["a", "b"]

    def test_variable_names_are_stable_per_object(self, context):
        first, second = Book(), Book()
        assert context.to_variable_name(first) == "book_1"
        assert context.to_variable_name(second) == "book_2"
        assert context.to_variable_name(first) == "book_1"
        assert context.to_variable_name(Library()) == "library_1"

    def test_variable_name_of_none(self, context):
        assert context.to_variable_name(None) == "None"
