from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from ..protocol.messages import Documentation, Inspection, InspectionResult
from .documentation import get_documentation
from .parser import Expression


def empty_inspection(code: str, cursor_pos: int) -> InspectionResult:
    return InspectionResult(code=code, cursor_pos=cursor_pos)


def build_inspection(
    code: str,
    cursor_pos: int,
    expression: Expression,
    inspection: Inspection,
) -> InspectionResult:
    """Stamp the request's code and cursor onto the worker's inspection."""
    return InspectionResult(
        code=code,
        cursor_pos=cursor_pos,
        matched_text=expression.matched_text,
        **inspection.model_dump(),
    )


def find_documentation(
    constructor_list: Optional[Iterable[str]],
    selector: str,
) -> Optional[Documentation]:
    """Find documentation for ``selector`` along a chain of constructors.

    Args:
        constructor_list: Constructor names of the scope, most-derived first
        selector: Property name looked up on each constructor's prototype

    Returns:
        Documentation of the first constructor that documents ``selector``
    """
    for constructor_name in constructor_list or ():
        doc = get_documentation(f"{constructor_name}.prototype.{selector}")
        if doc:
            return doc
    return None
