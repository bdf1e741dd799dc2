"""Feasibility Checker — Will this complexity fit in the time limit?

Compares an estimated operation count with what a judge machine can do in
the time limit (``time_limit_sec × ops_per_second``, 10^8 ops/s by
default):

    safe        estimate <= 10% of the budget
    borderline  estimate <= the budget
    unsafe      anything more
"""

import math
from dataclasses import dataclass
from typing import Literal, Mapping

from bigolens.analysis.estimator import AnalysisResult
from bigolens.feasibility.presets import (
    estimate_operations,
    get_preset,
    to_positive_number,
    to_variable_map,
)

Verdict = Literal["safe", "borderline", "unsafe"]

DEFAULT_OPS_PER_SECOND = 100_000_000
SAFE_RATIO = 0.1

VERDICT_LABELS: dict[str, str] = {
    "safe": "comfortably within the limit",
    "borderline": "just within the limit",
    "unsafe": "exceeds the limit",
}

VERDICT_MARKERS: dict[str, str] = {
    "safe": "OK",
    "borderline": "WARN",
    "unsafe": "NG",
}


@dataclass(frozen=True)
class FeasibilityResult:
    """Outcome of one feasibility check."""

    preset_label: str
    estimated_ops: float
    limit_ops: float
    verdict: Verdict
    verdict_label: str

    @property
    def marker(self) -> str:
        """Short status marker: OK, WARN or NG."""
        return VERDICT_MARKERS[self.verdict]

    def to_json(self) -> dict:
        return {
            "presetLabel": self.preset_label,
            "estimatedOps": self.estimated_ops,
            "limitOps": self.limit_ops,
            "verdict": self.verdict,
            "verdictLabel": self.verdict_label,
        }


def _judge(label: str, estimated_ops: float, time_limit_sec, ops_per_second: float) -> FeasibilityResult:
    if not math.isfinite(estimated_ops) or estimated_ops < 0:
        estimated_ops = math.inf

    limit_ops = to_positive_number(time_limit_sec) * ops_per_second

    if estimated_ops <= limit_ops * SAFE_RATIO:
        verdict = "safe"
    elif estimated_ops <= limit_ops:
        verdict = "borderline"
    else:
        verdict = "unsafe"

    return FeasibilityResult(
        preset_label=label,
        estimated_ops=estimated_ops,
        limit_ops=limit_ops,
        verdict=verdict,
        verdict_label=VERDICT_LABELS[verdict],
    )


def check_feasibility(
    preset_id: str,
    variables: Mapping[str, object],
    time_limit_sec=2.0,
    ops_per_second: float = DEFAULT_OPS_PER_SECOND,
) -> FeasibilityResult:
    """
    Estimate operations for a preset and judge them against the limit.

    Args:
        preset_id: Id from COMPLEXITY_PRESETS (e.g. "O_N_LOG_N")
        variables: Sizes by name, e.g. {"N": "200000", "M": 5}
        time_limit_sec: Time limit in seconds (invalid input counts as 0)
        ops_per_second: Operations the judge runs per second

    Returns:
        FeasibilityResult with the estimate, budget and verdict

    Raises:
        ValueError: If preset_id is unknown

    Example:
        >>> check_feasibility("O_N2", {"N": 200000}).verdict
        'unsafe'
    """
    preset = get_preset(preset_id)
    estimated = preset.evaluate(to_variable_map(variables))
    return _judge(preset.label, estimated, time_limit_sec, ops_per_second)


def check_analysis(
    result: AnalysisResult,
    n,
    time_limit_sec=2.0,
    ops_per_second: float = DEFAULT_OPS_PER_SECOND,
) -> FeasibilityResult:
    """Judge an analysis result at input size ``n``, labelled with its expression."""
    if result.loop_count == 0 and result.sort_call_count > 0:
        linear_depth, log_depth = 1, 1
    else:
        linear_depth, log_depth = result.max_linear_depth, result.max_log_depth

    estimated = estimate_operations(linear_depth, log_depth, n)
    return _judge(result.expression, estimated, time_limit_sec, ops_per_second)


def format_operation_count(count: float) -> str:
    """
    Format an operation count for display.

    Examples:
        >>> format_operation_count(3_600_000)
        '3.6x10^6'
        >>> format_operation_count(12345.6)
        '12,346'
        >>> format_operation_count(17.609)
        '17.61'
    """
    if not math.isfinite(count):
        return "Infinity"

    absolute = abs(count)
    if absolute >= 1_000_000 or 0 < absolute < 0.01:
        mantissa, exponent = f"{count:.1e}".split("e")
        return f"{mantissa}x10^{int(exponent)}"

    if absolute >= 1_000:
        return f"{math.floor(count + 0.5):,}"

    return f"{count:.2f}".rstrip("0").rstrip(".")


def status_summary(result: FeasibilityResult | None, default_label: str = "O(N log N)") -> str:
    """One-line summary for a status bar, e.g. ``O(N²) -> ~4.0x10^10 NG``."""
    if result is None:
        return f"{default_label} unchecked"
    return f"{result.preset_label} -> ~{format_operation_count(result.estimated_ops)} {result.marker}"
