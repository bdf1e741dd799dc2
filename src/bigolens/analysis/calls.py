"""Call Detector — Count calls whose cost dominates a loop-free solution.

A single ``std::sort`` turns an otherwise linear program into
``O(N log N)``, and no amount of loop scanning would notice. This module
counts such calls as whole identifiers followed by ``(``:

    sort(v.begin(), v.end())        counted
    std::sort(a, a + n)             counted once
    v.sort()                        counted
    mySort(v) / sorted(v)           not counted
"""

import re

from bigolens.config import DEFAULT_SORT_CALLS


def _call_pattern(names: tuple[str, ...]) -> re.Pattern:
    alternatives = "|".join(re.escape(name) for name in names)
    # Qualifiers (std::, ranges::, obj.) end in ':' or '.', never a word char
    return re.compile(rf"(?<!\w)(?:{alternatives})\s*\(")


def count_significant_calls(sanitized: str, names: tuple[str, ...] = DEFAULT_SORT_CALLS) -> int:
    """
    Count non-overlapping calls to any of ``names``.

    Args:
        sanitized: Source text with comments and literals blanked
        names: Routine names to look for (defaults to sort and stable_sort)

    Returns:
        Number of matching call sites

    Example:
        >>> count_significant_calls("std::sort(v.begin(), v.end()); mySort(v);")
        1
    """
    if not names:
        return 0
    return len(_call_pattern(tuple(names)).findall(sanitized))
