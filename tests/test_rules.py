"""Test rule constructors and pattern anchoring."""

import re

from spanlex.rules import (
    DelimitedRule,
    SimpleRule,
    anchor,
    matcher,
    multimatcher,
    multiskipper,
    skipper,
)


class TestConstructors:
    def test_matcher(self):
        rule = matcher(r"\d+", "value")
        assert isinstance(rule, SimpleRule)
        assert rule.pattern.pattern == r"\d+"
        assert rule.class_name == "value"

    def test_skipper_has_no_class(self):
        assert skipper(r"\s+").class_name is None

    def test_multimatcher(self):
        rule = multimatcher(r"/\*", r"\*/", "comment")
        assert isinstance(rule, DelimitedRule)
        assert rule.start.pattern == r"/\*"
        assert rule.end.pattern == r"\*/"
        assert rule.class_name == "comment"

    def test_multiskipper_has_no_class(self):
        assert multiskipper("<<", ">>").class_name is None

    def test_compiled_pattern_reused(self):
        pattern = re.compile("abc")
        assert matcher(pattern, "k").pattern is pattern

    def test_flags_added_to_compiled_pattern(self):
        rule = matcher(re.compile("abc"), "k", re.IGNORECASE)
        assert rule.pattern.match("ABC") is not None

    def test_flags_apply_to_both_delimiters(self):
        rule = multimatcher("begin", "end", "k", re.IGNORECASE)
        assert rule.start.match("BEGIN") is not None
        assert rule.end.search("x END") is not None

    def test_rules_are_hashable(self):
        assert len({matcher("a", "k"), matcher("a", "k")}) == 1


class TestAnchor:
    def test_only_matches_at_start(self):
        pattern = anchor(re.compile("b"))
        assert pattern.search("ab") is None
        assert pattern.match("ba") is not None

    def test_wraps_alternation(self):
        assert anchor(re.compile("a|b")).pattern == "^(?:a|b)"

    def test_keeps_flags(self):
        pattern = anchor(re.compile("x", re.IGNORECASE))
        assert pattern.flags & re.IGNORECASE

    def test_leading_inline_flags_stay_in_front(self):
        pattern = anchor(re.compile("(?i)b"))
        assert pattern.pattern == "(?i)^(?:b)"
        assert pattern.match("Ba") is not None
        assert pattern.search("ab") is None
