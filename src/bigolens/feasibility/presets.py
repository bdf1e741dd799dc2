"""Complexity Presets — Common Big-O classes as operation-count formulas.

Each preset turns a set of named sizes (``N``, ``M``, ...) into a rough
number of basic operations. Inputs are forgiving: missing, negative,
non-numeric or non-finite values count as 0, and results that overflow a
float become ``math.inf`` instead of raising.

Usage:
    from bigolens.feasibility.presets import get_preset, to_variable_map

    preset = get_preset("O_N_LOG_N")
    preset.evaluate(to_variable_map({"N": "200000"}))  # ~3.5e6
"""

import math
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

Variables = dict[str, float]


# ---------------------------------------------------------------------------
# Numeric helpers
# ---------------------------------------------------------------------------

def to_positive_number(value) -> float:
    """
    Coerce user input to a finite number >= 0, or 0.

    Example:
        >>> to_positive_number("1e5"), to_positive_number("abc"), to_positive_number(-3)
        (100000.0, 0.0, 0.0)
    """
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(parsed) or parsed < 0:
        return 0.0
    return parsed


def safe_log2(value) -> float:
    """log2 clamped so that values below 1 give 0."""
    return math.log2(max(1.0, to_positive_number(value)))


def safe_pow(base: float, exponent: float) -> float:
    """``base ** exponent``, with overflow reported as infinity."""
    try:
        return float(base) ** exponent
    except OverflowError:
        return math.inf


def factorial(value) -> float:
    """N! as a float; anything above 170! is infinity."""
    n = math.floor(to_positive_number(value))
    if n > 170:
        return math.inf
    return float(math.factorial(n))


def to_variable_map(variables: Mapping[str, object]) -> Variables:
    """
    Normalise user-entered variables for preset evaluation.

    Names are trimmed and upper-cased; blank names are dropped. Values go
    through :func:`to_positive_number`.
    """
    mapped: Variables = {}
    for name, value in variables.items():
        normalized = str(name).strip().upper()
        if not normalized:
            continue
        mapped[normalized] = to_positive_number(value)
    return mapped


# ---------------------------------------------------------------------------
# Preset table
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ComplexityPreset:
    """A named complexity class and its operation-count formula."""

    id: str
    label: str
    evaluate: Callable[[Variables], float]
    # Exponents of N and log N, for presets an analysis result can map onto
    linear_power: Optional[int] = None
    log_power: Optional[int] = None


def _n(v: Variables) -> float:
    return to_positive_number(v.get("N"))


def _m(v: Variables) -> float:
    return to_positive_number(v.get("M"))


COMPLEXITY_PRESETS: list[ComplexityPreset] = [
    ComplexityPreset("O1", "O(1)", lambda v: 1.0, 0, 0),
    ComplexityPreset("O_LOG_N", "O(log N)", lambda v: safe_log2(_n(v)), 0, 1),
    ComplexityPreset("O_SQRT_N", "O(√N)", lambda v: math.sqrt(_n(v))),
    ComplexityPreset("O_N", "O(N)", _n, 1, 0),
    ComplexityPreset("O_N_LOG_N", "O(N log N)", lambda v: _n(v) * safe_log2(_n(v)), 1, 1),
    ComplexityPreset("O_N_SQRT_N", "O(N√N)", lambda v: _n(v) * math.sqrt(_n(v))),
    ComplexityPreset("O_N2", "O(N²)", lambda v: safe_pow(_n(v), 2), 2, 0),
    ComplexityPreset("O_N2_LOG_N", "O(N² log N)", lambda v: safe_pow(_n(v), 2) * safe_log2(_n(v)), 2, 1),
    ComplexityPreset("O_N3", "O(N³)", lambda v: safe_pow(_n(v), 3), 3, 0),
    ComplexityPreset("O_2N", "O(2^N)", lambda v: safe_pow(2, _n(v))),
    ComplexityPreset("O_N_2N", "O(N × 2^N)", lambda v: _n(v) * safe_pow(2, _n(v))),
    ComplexityPreset("O_N_FACT", "O(N!)", lambda v: factorial(_n(v))),
    ComplexityPreset("O_N_M", "O(N × M)", lambda v: _n(v) * _m(v)),
    ComplexityPreset(
        "O_N_M_LOG_NM",
        "O(N × M × log(N+M))",
        lambda v: _n(v) * _m(v) * safe_log2(_n(v) + _m(v)),
    ),
]

PRESETS_BY_ID: dict[str, ComplexityPreset] = {preset.id: preset for preset in COMPLEXITY_PRESETS}


def get_preset(preset_id: str) -> ComplexityPreset:
    """
    Look up a preset by id.

    Raises:
        ValueError: If the id is not in COMPLEXITY_PRESETS
    """
    try:
        return PRESETS_BY_ID[preset_id]
    except KeyError:
        raise ValueError(f"Unknown complexity preset: {preset_id}") from None


def preset_for_depths(linear_depth: int, log_depth: int) -> ComplexityPreset | None:
    """Find the preset equal to ``N^linear_depth × log^log_depth N``, if any."""
    for preset in COMPLEXITY_PRESETS:
        if preset.linear_power == linear_depth and preset.log_power == log_depth:
            return preset
    return None


def estimate_operations(linear_depth: int, log_depth: int, n) -> float:
    """
    Evaluate ``N^linear_depth × log2(N)^log_depth`` for any depth pair.

    Example:
        >>> estimate_operations(2, 0, 1000)
        1000000.0
    """
    size = to_positive_number(n)
    return safe_pow(size, linear_depth) * safe_pow(safe_log2(size), log_depth)
