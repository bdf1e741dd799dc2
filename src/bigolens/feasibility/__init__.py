"""Feasibility Module — Check an operation estimate against a time limit.

Usage:
    from bigolens.feasibility import check_feasibility, status_summary

    result = check_feasibility("O_N_LOG_N", {"N": 200000}, time_limit_sec=2)
    status_summary(result)  # "O(N log N) -> ~3.5x10^6 OK"
"""

from bigolens.feasibility.checker import (
    FeasibilityResult,
    check_analysis,
    check_feasibility,
    format_operation_count,
    status_summary,
)
from bigolens.feasibility.presets import (
    COMPLEXITY_PRESETS,
    ComplexityPreset,
    estimate_operations,
    get_preset,
    preset_for_depths,
)

__all__ = [
    "FeasibilityResult",
    "check_analysis",
    "check_feasibility",
    "format_operation_count",
    "status_summary",
    "COMPLEXITY_PRESETS",
    "ComplexityPreset",
    "estimate_operations",
    "get_preset",
    "preset_for_depths",
]
