"""Documentation for Javascript built-ins, keyed by fully-qualified name.

Descriptions and usage lines are summaries of the Mozilla Developer
Network reference pages linked from each entry.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Optional

from ..protocol.messages import Documentation

MDN = "https://developer.mozilla.org/en-US/docs/Web/JavaScript/Reference/Global_Objects/"

_ERROR_PREFIX_RE = re.compile(r"^[a-zA-Z]+Error\.")
_TYPED_ARRAY_PREFIX_RE = re.compile(r"^[a-zA-Z]+Array\.")


def _entry(name: str, description: str, usage: Optional[str] = None) -> dict[str, str]:
    entry = {
        "description": description,
        "url": MDN + name.replace(".prototype.", "/").replace(".", "/"),
    }
    if usage:
        entry["usage"] = usage
    return entry


DOCUMENTATION: dict[str, dict[str, str]] = {
    "parseInt": _entry(
        "parseInt",
        "The parseInt() function parses a string argument and returns an integer "
        "of the specified radix.",
        "parseInt(string, radix);",
    ),
    "parseFloat": _entry(
        "parseFloat",
        "The parseFloat() function parses a string argument and returns a floating "
        "point number.",
        "parseFloat(string)",
    ),
    "isNaN": _entry(
        "isNaN",
        "The isNaN() function determines whether a value is NaN or not.",
        "isNaN(testValue)",
    ),
    "isFinite": _entry(
        "isFinite",
        "The global isFinite() function determines whether the passed value is a "
        "finite number.",
        "isFinite(testedValue)",
    ),
    "encodeURIComponent": _entry(
        "encodeURIComponent",
        "The encodeURIComponent() function encodes a Uniform Resource Identifier "
        "(URI) component by replacing each instance of certain characters by escape "
        "sequences.",
        "encodeURIComponent(str);",
    ),
    "decodeURIComponent": _entry(
        "decodeURIComponent",
        "The decodeURIComponent() function decodes a Uniform Resource Identifier "
        "(URI) component previously created by encodeURIComponent.",
        "decodeURIComponent(encodedURI)",
    ),
    "Object": _entry(
        "Object",
        "The Object constructor creates an object wrapper.",
        "new Object([value])",
    ),
    "Object.keys": _entry(
        "Object.keys",
        "The Object.keys() method returns an array of a given object's own "
        "enumerable properties.",
        "Object.keys(obj)",
    ),
    "Object.assign": _entry(
        "Object.assign",
        "The Object.assign() method copies the values of all enumerable own "
        "properties from one or more source objects to a target object.",
        "Object.assign(target, ...sources)",
    ),
    "Object.prototype.hasOwnProperty": _entry(
        "Object.prototype.hasOwnProperty",
        "The hasOwnProperty() method returns a boolean indicating whether the "
        "object has the specified property as own property.",
        "obj.hasOwnProperty(prop)",
    ),
    "Object.prototype.toString": _entry(
        "Object.prototype.toString",
        "The toString() method returns a string representing the object.",
        "obj.toString()",
    ),
    "Object.prototype.valueOf": _entry(
        "Object.prototype.valueOf",
        "The valueOf() method returns the primitive value of the specified object.",
        "object.valueOf()",
    ),
    "Function.prototype.apply": _entry(
        "Function.prototype.apply",
        "The apply() method calls a function with a given this value and arguments "
        "provided as an array.",
        "fun.apply(thisArg, [argsArray])",
    ),
    "Function.prototype.bind": _entry(
        "Function.prototype.bind",
        "The bind() method creates a new function that, when called, has its this "
        "keyword set to the provided value.",
        "fun.bind(thisArg[, arg1[, arg2[, ...]]])",
    ),
    "Function.prototype.call": _entry(
        "Function.prototype.call",
        "The call() method calls a function with a given this value and arguments "
        "provided individually.",
        "fun.call(thisArg[, arg1[, arg2[, ...]]])",
    ),
    "Array": _entry(
        "Array",
        "The JavaScript Array object is a global object that is used in the "
        "construction of arrays; which are high-level, list-like objects.",
        "new Array(arrayLength)",
    ),
    "Array.isArray": _entry(
        "Array.isArray",
        "The Array.isArray() method determines whether the passed value is an Array.",
        "Array.isArray(obj)",
    ),
    "Array.prototype.concat": _entry(
        "Array.prototype.concat",
        "The concat() method is used to merge two or more arrays.",
        "var new_array = old_array.concat(value1[, value2[, ...[, valueN]]])",
    ),
    "Array.prototype.filter": _entry(
        "Array.prototype.filter",
        "The filter() method creates a new array with all elements that pass the "
        "test implemented by the provided function.",
        "var newArray = arr.filter(callback[, thisArg])",
    ),
    "Array.prototype.forEach": _entry(
        "Array.prototype.forEach",
        "The forEach() method executes a provided function once for each array "
        "element.",
        "arr.forEach(callback[, thisArg])",
    ),
    "Array.prototype.indexOf": _entry(
        "Array.prototype.indexOf",
        "The indexOf() method returns the first index at which a given element can "
        "be found in the array, or -1 if it is not present.",
        "arr.indexOf(searchElement[, fromIndex = 0])",
    ),
    "Array.prototype.join": _entry(
        "Array.prototype.join",
        "The join() method joins all elements of an array into a string.",
        "arr.join([separator = ','])",
    ),
    "Array.prototype.map": _entry(
        "Array.prototype.map",
        "The map() method creates a new array with the results of calling a "
        "provided function on every element in this array.",
        "var new_array = arr.map(callback[, thisArg])",
    ),
    "Array.prototype.pop": _entry(
        "Array.prototype.pop",
        "The pop() method removes the last element from an array and returns that "
        "element.",
        "arr.pop()",
    ),
    "Array.prototype.push": _entry(
        "Array.prototype.push",
        "The push() method adds one or more elements to the end of an array and "
        "returns the new length of the array.",
        "arr.push(element1, ..., elementN)",
    ),
    "Array.prototype.reduce": _entry(
        "Array.prototype.reduce",
        "The reduce() method applies a function against an accumulator and each "
        "value of the array (from left-to-right) to reduce it to a single value.",
        "arr.reduce(callback[, initialValue])",
    ),
    "Array.prototype.slice": _entry(
        "Array.prototype.slice",
        "The slice() method returns a shallow copy of a portion of an array into a "
        "new array object.",
        "arr.slice([begin[, end]])",
    ),
    "Array.prototype.length": _entry(
        "Array.prototype.length",
        "The length property of an object which is an instance of type Array sets "
        "or returns the number of elements in that array.",
        "arr.length",
    ),
    "TypedArray.prototype.length": _entry(
        "TypedArray.prototype.length",
        "The length accessor property represents the length (in elements) of a "
        "typed array.",
        "typedarray.length",
    ),
    "TypedArray.prototype.set": _entry(
        "TypedArray.prototype.set",
        "The set() method stores multiple values in the typed array, reading input "
        "values from a specified array.",
        "typedarray.set(array[, offset])",
    ),
    "TypedArray.prototype.subarray": _entry(
        "TypedArray.prototype.subarray",
        "The subarray() method returns a new TypedArray on the same ArrayBuffer "
        "store and with the same element types as for this TypedArray object.",
        "typedarray.subarray([begin [,end]])",
    ),
    "String": _entry(
        "String",
        "The String global object is a constructor for strings, or a sequence of "
        "characters.",
        "String(thing)",
    ),
    "String.prototype.charAt": _entry(
        "String.prototype.charAt",
        "The charAt() method returns the specified character from a string.",
        "str.charAt(index)",
    ),
    "String.prototype.indexOf": _entry(
        "String.prototype.indexOf",
        "The indexOf() method returns the index within the calling String object "
        "of the first occurrence of the specified value, or -1 if not found.",
        "str.indexOf(searchValue[, fromIndex])",
    ),
    "String.prototype.replace": _entry(
        "String.prototype.replace",
        "The replace() method returns a new string with some or all matches of a "
        "pattern replaced by a replacement.",
        "str.replace(regexp|substr, newSubStr|function)",
    ),
    "String.prototype.slice": _entry(
        "String.prototype.slice",
        "The slice() method extracts a section of a string and returns a new "
        "string.",
        "str.slice(beginSlice[, endSlice])",
    ),
    "String.prototype.split": _entry(
        "String.prototype.split",
        "The split() method splits a String object into an array of strings by "
        "separating the string into substrings.",
        "str.split([separator[, limit]])",
    ),
    "String.prototype.toUpperCase": _entry(
        "String.prototype.toUpperCase",
        "The toUpperCase() method returns the calling string value converted to "
        "upper case.",
        "str.toUpperCase()",
    ),
    "String.prototype.length": _entry(
        "String.prototype.length",
        "The length property represents the length of a string.",
        "str.length",
    ),
    "Number.prototype.toFixed": _entry(
        "Number.prototype.toFixed",
        "The toFixed() method formats a number using fixed-point notation.",
        "numObj.toFixed([digits])",
    ),
    "Number.prototype.toString": _entry(
        "Number.prototype.toString",
        "The toString() method returns a string representing the specified Number "
        "object.",
        "numObj.toString([radix])",
    ),
    "Math": _entry(
        "Math",
        "Math is a built-in object that has properties and methods for "
        "mathematical constants and functions.",
    ),
    "Math.floor": _entry(
        "Math.floor",
        "The Math.floor() function returns the largest integer less than or equal "
        "to a given number.",
        "Math.floor(x)",
    ),
    "Math.max": _entry(
        "Math.max",
        "The Math.max() function returns the largest of zero or more numbers.",
        "Math.max([value1[, value2[, ...]]])",
    ),
    "Math.random": _entry(
        "Math.random",
        "The Math.random() function returns a floating-point, pseudo-random number "
        "in the range [0, 1).",
        "Math.random()",
    ),
    "JSON.parse": _entry(
        "JSON.parse",
        "The JSON.parse() method parses a JSON string, constructing the JavaScript "
        "value or object described by the string.",
        "JSON.parse(text[, reviver])",
    ),
    "JSON.stringify": _entry(
        "JSON.stringify",
        "The JSON.stringify() method converts a JavaScript value to a JSON string.",
        "JSON.stringify(value[, replacer[, space]])",
    ),
    "Promise.prototype.then": _entry(
        "Promise.prototype.then",
        "The then() method returns a Promise. It takes two arguments: callback "
        "functions for the success and failure cases of the Promise.",
        "p.then(onFulfilled, onRejected);",
    ),
    "Error": _entry(
        "Error",
        "The Error constructor creates an error object.",
        "new Error([message[, fileName[, lineNumber]]])",
    ),
    "Error.prototype.message": _entry(
        "Error.prototype.message",
        "The message property is a human-readable description of the error.",
        "e.message",
    ),
    "Error.prototype.name": _entry(
        "Error.prototype.name",
        "The name property represents a name for the type of error.",
        "e.name",
    ),
    "Error.prototype.toString": _entry(
        "Error.prototype.toString",
        "The toString() method returns a string representing the specified Error "
        "object.",
        "e.toString()",
    ),
}


def get_documentation(
    name: str,
    table: Optional[Mapping[str, Mapping[str, str]]] = None,
) -> Optional[Documentation]:
    """Look up documentation for a fully-qualified Javascript name.

    Names of specific error types (``RangeError.``) fall back to the
    ``Error.`` entries and typed-array variants (``Uint8Array.``) fall back
    to the ``TypedArray.`` entries.

    Args:
        name: Fully-qualified name, e.g. ``"Array.prototype.map"``
        table: Documentation table; defaults to :data:`DOCUMENTATION`

    Returns:
        The documentation record, or None if there is none
    """
    if table is None:
        table = DOCUMENTATION

    for candidate in (
        name,
        _ERROR_PREFIX_RE.sub("Error.", name, count=1),
        _TYPED_ARRAY_PREFIX_RE.sub("TypedArray.", name, count=1),
    ):
        if candidate in table:
            return Documentation.model_validate(table[candidate])

    return None
