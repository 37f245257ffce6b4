"""Unit tests for documentation lookup."""

import pytest

from nel.language.documentation import DOCUMENTATION, get_documentation
from nel.protocol.messages import Documentation

TABLE = {
    "Error.prototype.toString": {
        "description": "Returns a string representing the error.",
        "usage": "e.toString()",
        "url": "https://example.org/Error/toString",
    },
    "TypedArray.prototype.set": {
        "description": "Stores multiple values.",
        "url": "https://example.org/TypedArray/set",
    },
    "Float64Array.prototype.set": {
        "description": "Own entry.",
        "url": "https://example.org/Float64Array/set",
    },
}


@pytest.mark.unit
class TestLookupRules:
    """Direct hits and prefix rewrites."""

    def test_direct_hit(self):
        doc = get_documentation("Error.prototype.toString", TABLE)
        assert isinstance(doc, Documentation)
        assert doc.usage == "e.toString()"

    def test_error_subtype_falls_back_to_error(self):
        doc = get_documentation("RangeError.prototype.toString", TABLE)
        assert doc is not None
        assert doc.url == "https://example.org/Error/toString"

    def test_typed_array_falls_back_to_typed_array(self):
        doc = get_documentation("Uint8Array.prototype.set", TABLE)
        assert doc is not None
        assert doc.description == "Stores multiple values."
        assert doc.usage is None

    def test_direct_hit_wins_over_rewrite(self):
        doc = get_documentation("Float64Array.prototype.set", TABLE)
        assert doc.description == "Own entry."

    def test_not_found(self):
        assert get_documentation("Foo.prototype.bar", TABLE) is None
        assert get_documentation("RangeError.prototype.nope", TABLE) is None

    def test_rewrite_needs_a_prefix(self):
        # "Error." and "Array." themselves are not rewritten
        assert get_documentation("Array.prototype.set", TABLE) is None


@pytest.mark.unit
class TestDefaultTable:
    """The built-in documentation table."""

    def test_entries_validate(self):
        for name, entry in DOCUMENTATION.items():
            doc = Documentation.model_validate(entry)
            assert doc.url.startswith("https://developer.mozilla.org/"), name

    def test_builtin_lookup(self):
        doc = get_documentation("Array.prototype.map")
        assert doc is not None
        assert doc.url.endswith("/Array/map")

    def test_builtin_error_fallback(self):
        assert get_documentation("TypeError.prototype.toString") == get_documentation(
            "Error.prototype.toString"
        )

    def test_builtin_typed_array_fallback(self):
        doc = get_documentation("Int32Array.prototype.subarray")
        assert doc is not None
        assert "subarray" in doc.description
