"""Unit tests for completion results."""

import pytest

from nel.language.completion import (
    GLOBAL_SCOPE,
    RESERVED_WORDS,
    build_completion,
    empty_completion,
    scope_code,
)
from nel.language.parser import parse_expression


def complete(code, names, cursor_pos=None):
    if cursor_pos is None:
        cursor_pos = len(code)
    expression = parse_expression(code, cursor_pos)
    return build_completion(code, cursor_pos, expression, names)


@pytest.mark.unit
class TestMatchList:
    """Filtering, keywords and wrapping."""

    def test_filter_by_selector_keeps_order(self):
        result = complete("obj.foo", ["foo", "foobar", "bar"])
        assert result.matches == ["obj.foo", "obj.foobar"]

    def test_scoped_completion_has_no_keywords(self):
        result = complete("obj.", ["a"])
        assert result.matches == ["obj.a"]

    def test_filter_is_case_sensitive(self):
        result = complete("obj.Foo", ["foo", "Foobar"])
        assert result.matches == ["obj.Foobar"]

    def test_global_completion_appends_reserved_words(self):
        result = complete("", ["parseInt"])
        assert result.matches == ["parseInt", *RESERVED_WORDS]

    def test_global_completion_filters_reserved_words(self):
        result = complete("var x = tr", ["trace"])
        assert result.matches == ["trace", "try", "true"]

    def test_duplicates_are_kept(self):
        result = complete("obj.to", ["toString", "toString"])
        assert result.matches == ["obj.toString", "obj.toString"]

    def test_double_quote_wrapping(self):
        result = complete('obj["fo', ["foo", "bar"])
        assert result.matches == ['obj["foo"]']

    def test_single_quote_wrapping(self):
        result = complete("obj['", ["a b", "c"])
        assert result.matches == ["obj['a b']", "obj['c']"]

    def test_reserved_words_order(self):
        assert RESERVED_WORDS[0] == "break"
        assert RESERVED_WORDS[-3:] == ("null", "true", "false")
        assert "yield" in RESERVED_WORDS


@pytest.mark.unit
class TestReplacementSpan:
    """cursor_start / cursor_end."""

    def test_span_covers_matched_text(self):
        code = "obj.fo"
        result = complete(code, ["foo", "fob"])
        assert result.matched_text == "obj.fo"
        assert result.cursor_start == 0
        assert result.cursor_end == 6

    def test_span_starts_at_expression(self):
        code = "x = obj.fo"
        result = complete(code, ["foo"])
        assert result.cursor_start == 4
        assert result.cursor_end == 10

    def test_span_extends_over_text_after_cursor(self):
        code = "obj.foo + 1"
        result = complete(code, ["foo", "foobar"], cursor_pos=5)
        assert result.matched_text == "obj.f"
        assert result.cursor_start == 0
        # "obj.foo" is the shortest candidate and agrees with the code up to 7
        assert result.cursor_end == 7

    def test_span_stops_at_end_of_code(self):
        result = complete("obj.f", ["foo"])
        assert result.cursor_end == 5

    def test_shortest_tie_uses_first(self):
        code = "obj.abx"
        result = complete(code, ["abc", "abx"], cursor_pos=6)
        assert result.matches == ["obj.abc", "obj.abx"]
        # "obj.abc" wins the tie; it disagrees with the code at "x"
        assert result.cursor_end == 6

    def test_span_after_whitespace(self):
        code = "foo "
        result = complete(code, ["document"])
        assert result.matched_text == ""
        # the empty match is found at the start of the code
        assert result.cursor_start == 0
        # shortest candidate "do" disagrees with "foo " right away
        assert result.cursor_end == 0

    def test_span_starts_at_first_occurrence(self):
        code = "a.b; a.b"
        result = complete(code, ["b", "bc"])
        assert result.matches == ["a.b", "a.bc"]
        assert result.cursor_start == 0
        assert result.cursor_end == 3

    def test_no_matches(self):
        result = complete("obj.zz", ["foo"])
        assert result.matches == []
        assert result.cursor_start == result.cursor_end == 6
        assert result.matched_text == "obj.zz"


@pytest.mark.unit
class TestHelpers:
    def test_empty_completion(self):
        result = empty_completion("f().", 4)
        assert result.matches == []
        assert result.matched_text == ""
        assert result.cursor_start == result.cursor_end == 4

    def test_scope_code(self):
        assert scope_code(parse_expression("foo.b", 5)) == "foo"
        assert scope_code(parse_expression("fo", 2)) == GLOBAL_SCOPE

    def test_wire_names(self):
        wire = complete("obj.f", ["foo"]).to_wire()
        assert wire["list"] == ["obj.foo"]
        assert wire["cursorPos"] == 5
        assert wire["matchedText"] == "obj.f"
        assert wire["cursorStart"] == 0
        assert wire["cursorEnd"] == 5
