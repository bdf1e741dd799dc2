"""Complexity Estimator — One call from source text to a Big-O report.

Pipeline (every step is a pure function of its input):

    source ──sanitize──▶ clean text ──scan_loops──▶ loop depths
                             │                          │
                             └─count_significant_calls─▶ sort calls
                                                        │
                              build_expression ◀────────┘

All analysis is PURELY STATIC — nothing is compiled or executed, and the
result is an advisory lower bound, not a proof.

Usage:
    from bigolens.analysis import analyze

    result = analyze(source_code)
    print(result.expression)   # "O(N^2)"
"""

import logging
from dataclasses import dataclass

from bigolens.analysis.calls import count_significant_calls
from bigolens.analysis.expression import LINEARITHMIC_EXPRESSION, build_expression
from bigolens.analysis.sanitizer import sanitize
from bigolens.analysis.scanner import scan_loops
from bigolens.config import Settings

logger = logging.getLogger(__name__)

DISCLAIMER = (
    "Heuristic estimate only. Recursion and work hidden inside called "
    "functions are not analyzed."
)


# ---------------------------------------------------------------------------
# Result dataclass
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AnalysisResult:
    """
    Outcome of one :func:`analyze` call.

    Depths count loops nested inside each other: two linear loops one
    inside the other give ``max_linear_depth == 2``.
    """

    expression: str
    loop_count: int
    max_linear_depth: int
    max_log_depth: int
    sort_call_count: int
    note: str

    def __str__(self) -> str:
        return (
            f"{self.expression} | Loops: {self.loop_count} "
            f"(linear depth {self.max_linear_depth}, log depth {self.max_log_depth}) | "
            f"Sort calls: {self.sort_call_count}"
        )

    def to_json(self) -> dict:
        """Structured output for the editor panel and ``--json``."""
        return {
            "expression": self.expression,
            "loopCount": self.loop_count,
            "maxLinearDepth": self.max_linear_depth,
            "maxLogDepth": self.max_log_depth,
            "sortCallCount": self.sort_call_count,
            "note": self.note,
        }


def _compose_note(loop_count: int, sort_call_count: int) -> str:
    parts = []
    if sort_call_count:
        parts.append(f"Found {sort_call_count} sort call(s), each O(N log N).")
        if loop_count == 0:
            parts.append("No loops detected, so the sort cost sets the estimate.")
    parts.append(DISCLAIMER)
    return " ".join(parts)


# ---------------------------------------------------------------------------
# Main API
# ---------------------------------------------------------------------------

def analyze(source: str, settings: Settings | None = None) -> AnalysisResult:
    """
    Estimate the time complexity of a C-family program.

    Malformed, truncated or empty input is fine: the worst case is a
    smaller estimate than the true complexity.

    Args:
        source: Raw program text
        settings: Optional settings (only ``sort_calls`` is used here)

    Returns:
        AnalysisResult with the expression, loop metrics and a note

    Example:
        >>> analyze("for(int i=0;i<n;i++){ sum += i; }").expression
        'O(N)'
        >>> analyze("sort(v.begin(), v.end());").expression
        'O(N × log N)'
    """
    settings = settings or Settings()

    clean = sanitize(source)
    metrics = scan_loops(clean)
    sort_calls = count_significant_calls(clean, settings.sort_calls)

    expression = build_expression(metrics.max_linear_depth, metrics.max_log_depth)
    if metrics.loop_count == 0 and sort_calls > 0:
        expression = LINEARITHMIC_EXPRESSION

    logger.debug("Estimated %s (%d loops, %d sort calls)", expression, metrics.loop_count, sort_calls)

    return AnalysisResult(
        expression=expression,
        loop_count=metrics.loop_count,
        max_linear_depth=metrics.max_linear_depth,
        max_log_depth=metrics.max_log_depth,
        sort_call_count=sort_calls,
        note=_compose_note(metrics.loop_count, sort_calls),
    )
