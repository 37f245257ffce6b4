"""Locate the property-access expression that ends at a cursor position.

The parser is a heuristic, not a full Javascript parser: it recognizes
chains of identifiers joined by ``.``, ``["..."]`` and ``['...']`` and
gives up (returns None) on anything else, e.g. calls or operators.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

import structlog

logger = structlog.get_logger()

_IDENTIFIER = r"[_$a-zA-Z][_$a-zA-Z0-9]*"

SIMPLE_IDENTIFIER_RE = re.compile(_IDENTIFIER + r"\Z")

COMPLEX_IDENTIFIER_RE = re.compile(
    _IDENTIFIER
    + r"(?:"
    + _IDENTIFIER
    + r"|\."
    + _IDENTIFIER
    + r"""|\[".*"\]|\['.*'\])*\Z"""
)

# Trailing access operator -> (left operator, right operator)
ACCESS_OPERATORS = (
    (".", ""),
    ('["', '"]'),
    ("['", "']"),
)


@dataclass(frozen=True)
class Expression:
    """A property access being completed or inspected.

    For ``foo["bar`` the parts are: ``matched_text='foo["bar'``,
    ``scope='foo'``, ``left_op='["'``, ``selector='bar'``,
    ``right_op='"]'``.
    """

    matched_text: str = ""
    scope: str = ""
    left_op: str = ""
    selector: str = ""
    right_op: str = ""


EMPTY_EXPRESSION = Expression()


def parse_expression(code: str, cursor_pos: int) -> Optional[Expression]:
    """Parse the expression that ends at ``cursor_pos``.

    Args:
        code: Javascript code
        cursor_pos: Cursor position within ``code``

    Returns:
        The parsed expression; an empty expression if the cursor is at the
        start of the code or right after whitespace; None if the text
        before the cursor is not a supported property access
    """
    expression = code[:cursor_pos]
    if not expression or expression[-1].isspace():
        return EMPTY_EXPRESSION

    selector = ""
    match = SIMPLE_IDENTIFIER_RE.search(expression)
    if match:
        selector = match.group(0)
        expression = expression[: match.start()]

    for left_op, right_op in ACCESS_OPERATORS:
        if expression.endswith(left_op):
            expression = expression[: -len(left_op)]
            break
    else:
        return Expression(
            matched_text=code[len(expression) : cursor_pos],
            selector=selector,
        )

    match = COMPLEX_IDENTIFIER_RE.search(expression)
    if match:
        return Expression(
            matched_text=code[match.start() : cursor_pos],
            scope=match.group(0),
            left_op=left_op,
            selector=selector,
            right_op=right_op,
        )

    if not left_op:
        return Expression(
            matched_text=code[len(expression) : cursor_pos],
            selector=selector,
        )

    logger.debug("expression_not_supported", code=code, cursor_pos=cursor_pos)
    return None
