"""Loop Classifier — Guess how a loop's trip count scales.

Pure functions called by the scanner. They look only at surface syntax in
a loop header (and, for ``while``, the loop body) and return an
:class:`IterationFactor`:

    CONSTANT     the bound looks like a compile-time constant (``while (1)``)
    LOGARITHMIC  the control variable is multiplied, divided or shifted
    LINEAR       anything else

Nothing here understands types or values. ``i = i >> 1`` or a helper
function that halves its argument is classified LINEAR, which is an
accepted underestimate.
"""

import logging
import re
from enum import Enum

logger = logging.getLogger(__name__)


class IterationFactor(Enum):
    """How a loop's iteration count grows with its governing variable."""

    CONSTANT = "constant"
    LINEAR = "linear"
    LOGARITHMIC = "logarithmic"


# ---------------------------------------------------------------------------
# Reserved words of the C family (C, C++, plus common literals and types).
# An identifier in this set never counts as a "non-trivial" bound.
# ---------------------------------------------------------------------------

RESERVED_KEYWORDS = frozenset({
    # C
    "auto", "break", "case", "char", "const", "continue", "default", "do",
    "double", "else", "enum", "extern", "float", "for", "goto", "if",
    "inline", "int", "long", "register", "restrict", "return", "short",
    "signed", "sizeof", "static", "struct", "switch", "typedef", "union",
    "unsigned", "void", "volatile", "while", "_Bool", "_Complex",
    # C++
    "alignas", "alignof", "and", "and_eq", "asm", "bitand", "bitor", "bool",
    "catch", "char8_t", "char16_t", "char32_t", "class", "compl", "concept",
    "consteval", "constexpr", "constinit", "const_cast", "co_await",
    "co_return", "co_yield", "decltype", "delete", "dynamic_cast",
    "explicit", "export", "friend", "mutable", "namespace", "new",
    "noexcept", "not", "not_eq", "operator", "or", "or_eq", "private",
    "protected", "public", "reinterpret_cast", "requires", "static_assert",
    "static_cast", "template", "this", "thread_local", "throw", "try",
    "typeid", "typename", "using", "virtual", "wchar_t", "xor", "xor_eq",
    # Literals
    "true", "false", "nullptr", "NULL",
})

_IDENTIFIER = re.compile(r"\b[A-Za-z_]\w*")

_COMPOUND_LOG_OP = re.compile(r"\*=|/=|>>=|<<=")
_SELF_SCALE = re.compile(r"\b([A-Za-z_]\w*)\s*=(?!=)\s*\1\b\s*[*/]")
_RESCALED_NAME = re.compile(r"(?<!\w)([A-Za-z_]\w*)\s*(?:\*=|/=|>>=|<<=)")

_SHIFT = re.compile(r">>|<<")
_STREAM = re.compile(r"\bw?(?:cin|cout|cerr)\b")
_HALVING = re.compile(r"/\s*2\b|\*\s*0?\.5\b")

_ASSIGNMENT_RHS = re.compile(r"\b[A-Za-z_]\w*\s*=(?!=)([^;{}]*)")
_MIDPOINT = re.compile(r"/\s*2\b|>>\s*1\b")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def free_identifiers(text: str) -> list[str]:
    """
    List identifiers in ``text`` that are not reserved words.

    Numeric suffixes (``10LL``, ``1e9``, ``0x1F``) are not identifiers
    because they never start on a word boundary.

    Example:
        >>> free_identifiers("i < (int)v.size() && true")
        ['i', 'v', 'size']
    """
    return [
        name for name in _IDENTIFIER.findall(text)
        if name not in RESERVED_KEYWORDS
    ]


def split_header(header: str) -> list[str]:
    """
    Split a ``for`` header on semicolons at nesting level zero.

    Semicolons inside nested ``()``, ``[]`` or ``{}`` (lambdas, casts)
    do not split.

    Example:
        >>> split_header("int i = 0; i < n; i++")
        ['int i = 0', ' i < n', ' i++']
    """
    parts = []
    depth = 0
    start = 0

    for i, ch in enumerate(header):
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth = max(0, depth - 1)
        elif ch == ";" and depth == 0:
            parts.append(header[start:i])
            start = i + 1

    parts.append(header[start:])
    return parts


def _scales_multiplicatively(text: str) -> bool:
    """True if ``text`` contains ``*=``, ``/=``, ``>>=``, ``<<=`` or ``v = v * ...``."""
    return bool(_COMPOUND_LOG_OP.search(text) or _SELF_SCALE.search(text))


def _rescaled_names(text: str) -> set[str]:
    """Names assigned with ``*=``, ``/=``, ``>>=``, ``<<=`` or ``v = v * ...``."""
    names = {match.group(1) for match in _RESCALED_NAME.finditer(text)}
    names.update(match.group(1) for match in _SELF_SCALE.finditer(text))
    return names


def _has_halving_midpoint(body: str, names: set[str]) -> bool:
    """
    Look for a binary-search midpoint built from the loop's bounds.

    Matches ``mid = (lo + hi) / 2`` and ``mid = lo + ((hi - lo) >> 1)``
    when ``lo`` and ``hi`` both appear in the loop condition.
    """
    for match in _ASSIGNMENT_RHS.finditer(body):
        rhs = match.group(1)
        if not _MIDPOINT.search(rhs):
            continue
        bounds = names.intersection(free_identifiers(rhs))
        if len(bounds) >= 2:
            return True
    return False


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def statement_rescales(statement: str, names: frozenset[str] | set[str]) -> bool:
    """
    Check whether a statement shrinks or grows a ``while`` loop geometrically.

    True when the statement rescales one of ``names`` (``n /= 2``,
    ``i = i * 3``) or assigns a halving midpoint built from two of them
    (``mid = (lo + hi) / 2``). Runs in time linear in the statement.

    Args:
        statement: Sanitized text of one statement or of a whole body
        names: Identifiers from the loop condition

    Example:
        >>> statement_rescales("int mid = lo + (hi - lo) / 2;", {"lo", "hi"})
        True
    """
    if not names:
        return False
    if not _rescaled_names(statement).isdisjoint(names):
        return True
    return _has_halving_midpoint(statement, set(names))


def classify_for(header: str) -> IterationFactor:
    """
    Classify a ``for`` loop from the text between its parentheses.

    Rules, in order:
        1. Fewer than three ``;``-separated parts (range-based
           ``for (auto x : v)``) -> LINEAR
        2. Update part scales multiplicatively -> LOGARITHMIC
        3. Condition has no non-reserved identifier -> CONSTANT
        4. Otherwise -> LINEAR

    Args:
        header: Sanitized header text without the outer parentheses

    Returns:
        The loop's IterationFactor
    """
    parts = split_header(header)
    if len(parts) < 3:
        return IterationFactor.LINEAR

    condition = parts[1]
    update = ";".join(parts[2:])

    if _scales_multiplicatively(update):
        factor = IterationFactor.LOGARITHMIC
    elif not free_identifiers(condition):
        factor = IterationFactor.CONSTANT
    else:
        factor = IterationFactor.LINEAR

    logger.debug("for (%s) -> %s", header.strip(), factor.value)
    return factor


def classify_while(condition: str, body: str = "", body_rescales: bool = False) -> IterationFactor:
    """
    Classify a ``while`` loop from its condition and body.

    Rules, in order:
        1. Condition has no non-reserved identifier -> CONSTANT
        2. Condition shifts or halves (``>>``, ``<<``, ``/ 2``, ``* 0.5``)
           -> LOGARITHMIC. ``cin >> x`` is stream extraction, not a shift.
        3. Body rescales a condition variable (``n /= 2``, ``i = i * 3``)
           or computes a halving midpoint of two condition variables
           -> LOGARITHMIC
        4. Otherwise -> LINEAR

    Args:
        condition: Sanitized condition text without parentheses
        body: Sanitized body text (may be empty)
        body_rescales: Rule 3 already established statement by statement
                       (see :func:`statement_rescales`), as the scanner does

    Returns:
        The loop's IterationFactor
    """
    names = free_identifiers(condition)
    if not names:
        factor = IterationFactor.CONSTANT
    elif (_SHIFT.search(condition) and not _STREAM.search(condition)) or _HALVING.search(condition):
        factor = IterationFactor.LOGARITHMIC
    elif body_rescales or (body and statement_rescales(body, set(names))):
        factor = IterationFactor.LOGARITHMIC
    else:
        factor = IterationFactor.LINEAR

    logger.debug("while (%s) -> %s", condition.strip(), factor.value)
    return factor
