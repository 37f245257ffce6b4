from __future__ import annotations

from collections.abc import Iterable

from ..protocol.messages import CompletionResult
from .parser import Expression

# Code whose property names are those of the global scope
GLOBAL_SCOPE = "global"

# Javascript reserved words (ECMA-262)
RESERVED_WORDS: tuple[str, ...] = (
    # keywords
    "break", "case", "catch", "continue", "debugger", "default",
    "delete", "do", "else", "finally", "for", "function", "if",
    "in", "instanceof", "new", "return", "switch", "this",
    "throw", "try", "typeof", "var", "void", "while", "with",
    # future reserved words
    "class", "const", "enum", "export", "extends", "import",
    "super",
    # future reserved words in strict mode
    "implements", "interface", "let", "package", "private",
    "protected", "public", "static", "yield",
    # null literal
    "null",
    # boolean literals
    "true", "false",
)  # fmt: skip


def scope_code(expression: Expression) -> str:
    """Code to send to the worker to list the names visible in a scope."""
    return expression.scope or GLOBAL_SCOPE


def empty_completion(code: str, cursor_pos: int) -> CompletionResult:
    return CompletionResult(
        matches=[],
        code=code,
        cursor_pos=cursor_pos,
        matched_text="",
        cursor_start=cursor_pos,
        cursor_end=cursor_pos,
    )


def build_completion(
    code: str,
    cursor_pos: int,
    expression: Expression,
    names: Iterable[str],
) -> CompletionResult:
    """Turn the property names of a scope into a completion result.

    Args:
        code: Code being completed
        cursor_pos: Cursor position within ``code``
        expression: Expression parsed at ``cursor_pos``
        names: Property names the worker found in the expression's scope

    Returns:
        Completion with every candidate written out in full (scope and
        access operators included) and the span of ``code`` to replace
    """
    matches = list(names)

    if not expression.scope:
        matches.extend(RESERVED_WORDS)

    if expression.selector:
        matches = [m for m in matches if m.startswith(expression.selector)]

    left = expression.scope + expression.left_op
    right = expression.right_op
    if left or right:
        matches = [left + m + right for m in matches]

    if not matches:
        cursor_start = cursor_end = cursor_pos
    else:
        cursor_start = code.find(expression.matched_text)
        cursor_end = cursor_start
        shortest = min(matches, key=len)
        for char in shortest:
            if cursor_end >= len(code) or code[cursor_end] != char:
                break
            cursor_end += 1

    return CompletionResult(
        matches=matches,
        code=code,
        cursor_pos=cursor_pos,
        matched_text=expression.matched_text,
        cursor_start=cursor_start,
        cursor_end=cursor_end,
    )
