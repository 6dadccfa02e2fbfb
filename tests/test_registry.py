# tests/test_registry.py
"""
Tests for pattern registration and matching.
"""

import pytest

from pathrules.actions import Action
from pathrules.context import TraversalContext
from pathrules.registry import normalize_pattern


def _action(name="", namespace=None):
    return Action(name=name, namespace=namespace)


class TestNormalizePattern:

    def test_strips_one_trailing_slash(self):
        assert normalize_pattern("a/b/") == "a/b"

    def test_only_one_slash_removed(self):
        assert normalize_pattern("a/b//") == "a/b/"

    def test_lone_slash_kept(self):
        assert normalize_pattern("/") == "/"

    def test_plain_patterns_untouched(self):
        assert normalize_pattern("a/b") == "a/b"
        assert normalize_pattern("") == ""


class TestRegistration:

    def test_rules_keep_call_order_across_patterns(self, registry):
        actions = [_action(str(i)) for i in range(5)]
        for pattern, action in zip(["x", "*/y", "x", "a/b", "*/y"], actions):
            registry.add(pattern, action)
        assert registry.rules() == actions

    def test_repeated_pattern_is_additive(self, registry):
        first, second = _action("1"), _action("2")
        registry.add("a", first)
        registry.add("a", second)
        assert registry.match("", "a") == [first, second]

    def test_empty_pattern_is_legal(self, registry):
        action = _action()
        registry.add("", action)
        assert registry.match(None, "") == [action]

    def test_entries_and_patterns(self, registry):
        a, b, c = _action("a"), _action("b"), _action("c")
        registry.add("x/", a)
        registry.add("*/y", b)
        registry.add("x", c)
        assert registry.entries() == [("x", a), ("*/y", b), ("x", c)]
        assert registry.patterns() == ["x", "*/y"]
        assert len(registry) == 3

    def test_rules_returns_a_copy(self, registry):
        registry.add("a", _action())
        registry.rules().clear()
        assert len(registry.rules()) == 1

    def test_clear_is_total(self, registry):
        registry.add("a/b", _action())
        registry.add("*/b", _action())
        registry.clear()
        assert registry.rules() == []
        assert registry.match("", "a/b") == []
        assert registry.match("", "z/b") == []
        assert registry.patterns() == []


class TestExactMatch:

    def test_exact_beats_wildcard(self, registry):
        exact, wild = _action("exact"), _action("wild")
        registry.add("*/b", wild)
        registry.add("a/b", exact)
        assert registry.match("", "a/b") == [exact]

    def test_trailing_slash_normalized_on_add(self, registry):
        action = _action()
        registry.add("a/b/", action)
        assert registry.match("", "a/b") == [action]

    def test_lone_slash_pattern(self, registry):
        action = _action()
        registry.add("/", action)
        assert registry.match("", "/") == [action]
        assert registry.match("", "") == []

    def test_no_match_is_empty_list(self, registry):
        registry.add("a", _action())
        assert registry.match("", "b") == []

    def test_match_is_pure(self, registry):
        registry.add("a", _action("1"))
        registry.add("*/a", _action("2"))
        first = registry.match("ns", "x/a")
        first.append(_action("intruder"))
        assert registry.match("ns", "x/a") != first
        assert registry.match("ns", "x/a") == registry.match("ns", "x/a")


class TestWildcardMatch:

    def test_tail_match(self, registry):
        action = _action()
        registry.add("*/x/y", action)
        assert registry.match("", "p/q/x/y") == [action]
        assert registry.match("", "x/z") == []

    def test_wildcard_matches_bare_suffix(self, registry):
        action = _action()
        registry.add("*/x/y", action)
        assert registry.match("", "x/y") == [action]

    def test_wildcard_respects_segment_boundary(self, registry):
        registry.add("*/book", _action())
        assert registry.match("", "library/notebook") == []

    def test_longest_suffix_wins(self, registry):
        short, long_ = _action("short"), _action("long")
        registry.add("*/b/c", short)
        registry.add("*/a/b/c", long_)
        assert registry.match("", "z/a/b/c") == [long_]

    def test_longest_suffix_wins_regardless_of_order(self, registry):
        short, long_ = _action("short"), _action("long")
        registry.add("*/a/b/c", long_)
        registry.add("*/b/c", short)
        assert registry.match("", "z/a/b/c") == [long_]
        assert registry.match("", "z/q/b/c") == [short]

    def test_wildcard_bucket_keeps_order(self, registry):
        actions = [_action(str(i)) for i in range(3)]
        for action in actions:
            registry.add("*/leaf", action)
        assert registry.match("", "root/leaf") == actions

    def test_star_slash_normalizes_to_star(self, registry):
        action = _action()
        registry.add("*/", action)
        assert registry.patterns() == ["*"]
        assert registry.match("", "a/b") == []

    def test_exact_filtered_empty_falls_back_to_wildcard(self, registry):
        scoped, wild = _action("scoped", "ns1"), _action("wild")
        registry.add("a/b", scoped)
        registry.add("*/b", wild)
        assert registry.match("ns2", "a/b") == [wild]
        assert registry.match("ns1", "a/b") == [scoped]

    def test_longest_wildcard_chosen_before_namespace_filter(self, registry):
        registry.add("*/b", _action("any"))
        registry.add("*/a/b", _action("scoped", "ns1"))
        assert registry.match("ns2", "x/a/b") == []


class TestNamespaceFiltering:

    @pytest.fixture
    def populated(self, registry):
        scoped = _action("scoped", "ns1")
        unscoped = _action("unscoped")
        registry.add("a", scoped)
        registry.add("a", unscoped)
        return registry, scoped, unscoped

    def test_other_namespace_excludes_scoped(self, populated):
        registry, scoped, unscoped = populated
        assert registry.match("ns2", "a") == [unscoped]

    def test_no_namespace_query_is_unfiltered(self, populated):
        registry, scoped, unscoped = populated
        assert registry.match(None, "a") == [scoped, unscoped]
        assert registry.match("", "a") == [scoped, unscoped]

    def test_same_namespace_includes_both(self, populated):
        registry, scoped, unscoped = populated
        assert registry.match("ns1", "a") == [scoped, unscoped]


class TestBinding:

    def test_bind_propagates_to_registered_actions(self, registry):
        actions = [_action(), _action()]
        for action in actions:
            registry.add("a", action)
        ctx = TraversalContext()
        registry.bind(ctx)
        assert registry.context is ctx
        assert all(action.context is ctx for action in actions)

    def test_add_after_bind_binds_immediately(self, registry):
        ctx = TraversalContext()
        registry.bind(ctx)
        action = _action()
        registry.add("a", action)
        assert action.context is ctx

    def test_rebinding_overwrites(self, registry):
        actions = [_action(), _action()]
        registry.add("a", actions[0])
        registry.add("*/b", actions[1])
        first, second = TraversalContext(), TraversalContext()
        registry.bind(first)
        registry.bind(second)
        assert all(action.context is second for action in actions)

    def test_unbound_registry_leaves_actions_unbound(self, registry):
        action = _action()
        registry.add("a", action)
        assert registry.context is None
        assert action.context is None
