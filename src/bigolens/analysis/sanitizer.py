"""Sanitizer — Blank out comments and literals, keep the layout.

Keywords that live inside comments or string/char literals must never be
mistaken for control flow. Instead of deleting that text (which would shift
every offset after it), each character inside a comment or literal is
replaced by a space. Newlines survive, so line numbers stay correct and
``len(sanitize(s)) == len(s)`` always holds.

Usage:
    from bigolens.analysis.sanitizer import sanitize

    clean = sanitize('puts("for ever"); // while (1)')
    # 'puts(          );             '
"""

from enum import Enum


class _State(Enum):
    NORMAL = "normal"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    STRING = "string"
    CHAR = "char"


_QUOTE_FOR_STATE = {_State.STRING: '"', _State.CHAR: "'"}


def _is_token_char(ch: str) -> bool:
    """Characters that can continue a number token such as ``0x1F'FFu``."""
    return ch.isalnum() or ch in "_.'"


def sanitize(source: str) -> str:
    """
    Replace comment and literal contents with spaces.

    Args:
        source: Raw source text (any content, possibly malformed)

    Returns:
        Text of identical length where only executable-looking
        characters remain. Unterminated comments and literals
        simply run to the end of the text.

    Example:
        >>> sanitize('x = "a;b"; /* for */')
        'x =      ;          '
    """
    out: list[str] = []
    state = _State.NORMAL
    escaped = False
    # True while inside a token that started with a digit. A quote there,
    # followed by an alphanumeric, is a C++14 digit separator (1'000'000).
    number_token = False
    i = 0
    n = len(source)

    while i < n:
        ch = source[i]
        nxt = source[i + 1] if i + 1 < n else ""

        if state is _State.NORMAL:
            if ch == "/" and nxt in ("/", "*"):
                state = _State.LINE_COMMENT if nxt == "/" else _State.BLOCK_COMMENT
                number_token = False
                out.append("  ")
                i += 2
                continue
            if ch == '"' or (ch == "'" and not (number_token and nxt.isalnum())):
                state = _State.STRING if ch == '"' else _State.CHAR
                escaped = False
                number_token = False
                out.append(" ")
                i += 1
                continue

            if not _is_token_char(ch):
                number_token = False
            elif i == 0 or not _is_token_char(source[i - 1]):
                number_token = ch.isdigit()
            out.append(ch)
            i += 1
            continue

        if state is _State.LINE_COMMENT:
            if ch == "\n":
                state = _State.NORMAL
                out.append("\n")
            else:
                out.append(" ")
            i += 1
            continue

        if state is _State.BLOCK_COMMENT:
            if ch == "*" and nxt == "/":
                state = _State.NORMAL
                out.append("  ")
                i += 2
                continue
            out.append("\n" if ch == "\n" else " ")
            i += 1
            continue

        # Inside a string or char literal
        if ch == "\n":
            escaped = False
            out.append("\n")
        elif escaped:
            escaped = False
            out.append(" ")
        elif ch == "\\":
            escaped = True
            out.append(" ")
        else:
            if ch == _QUOTE_FOR_STATE[state]:
                state = _State.NORMAL
            out.append(" ")
        i += 1

    return "".join(out)
