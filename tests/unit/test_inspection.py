"""Unit tests for inspection results."""

import pytest

from nel.language.inspection import build_inspection, empty_inspection, find_documentation
from nel.language.parser import parse_expression
from nel.protocol.messages import Inspection


@pytest.mark.unit
class TestFindDocumentation:
    """Walking the constructor chain."""

    def test_first_documented_constructor_wins(self):
        doc = find_documentation(["Foo", "Array", "Object"], "map")
        assert doc is not None
        assert doc.url.endswith("/Array/map")

    def test_falls_through_to_base_constructor(self):
        doc = find_documentation(["MyClass", "Object"], "hasOwnProperty")
        assert doc is not None
        assert "hasOwnProperty" in doc.description

    def test_error_subtype_in_chain(self):
        doc = find_documentation(["RangeError", "Error", "Object"], "toString")
        assert doc is not None
        assert doc.url.endswith("/Error/toString")

    def test_nothing_found(self):
        assert find_documentation(["MyClass", "Object"], "frobnicate") is None

    def test_missing_constructor_list(self):
        assert find_documentation(None, "map") is None
        assert find_documentation([], "map") is None


@pytest.mark.unit
class TestBuildInspection:
    def test_stamps_request_fields(self):
        code = "x = list.ma"
        expression = parse_expression(code, len(code))
        inspection = Inspection(
            string="function map() { [native code] }",
            type="function",
            constructor_list=["Function", "Object"],
            length=1,
        )
        result = build_inspection(code, len(code), expression, inspection)
        assert result.code == code
        assert result.cursor_pos == len(code)
        assert result.matched_text == "list.ma"
        assert result.type == "function"
        assert result.constructor_list == ["Function", "Object"]
        assert result.length == 1
        assert result.doc is None

    def test_empty_inspection(self):
        result = empty_inspection("f().x", 5)
        assert result.matched_text == ""
        assert result.string == ""
        assert result.type == ""
        assert result.to_wire() == {
            "code": "f().x",
            "cursorPos": 5,
            "matchedText": "",
            "string": "",
            "type": "",
        }
