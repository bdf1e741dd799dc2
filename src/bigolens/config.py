"""Settings — Defaults for analysis and feasibility checks.

Values come from environment variables when set, otherwise from the
defaults below:

    BIGOLENS_SORT_CALLS      comma-separated routine names  (sort,stable_sort)
    BIGOLENS_TIME_LIMIT      time limit in seconds          (2)
    BIGOLENS_OPS_PER_SECOND  simple operations per second   (100000000)
    BIGOLENS_DEFAULT_N       N used to judge an estimate    (200000)

Usage:
    from bigolens.config import Settings

    settings = Settings.from_env()
"""

import os
from dataclasses import dataclass

DEFAULT_SORT_CALLS = ("sort", "stable_sort")


@dataclass(frozen=True)
class Settings:
    """Tunable knobs shared by the library and the CLI."""

    sort_calls: tuple[str, ...] = DEFAULT_SORT_CALLS
    time_limit_sec: float = 2.0
    ops_per_second: float = 100_000_000
    default_n: float = 200_000

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ`` (for tests)

        Returns:
            Settings with every unset variable left at its default

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        sort_calls = defaults.sort_calls
        raw_calls = env.get("BIGOLENS_SORT_CALLS")
        if raw_calls is not None:
            sort_calls = tuple(name.strip() for name in raw_calls.split(",") if name.strip())

        return cls(
            sort_calls=sort_calls,
            time_limit_sec=_read_float(env, "BIGOLENS_TIME_LIMIT", defaults.time_limit_sec),
            ops_per_second=_read_float(env, "BIGOLENS_OPS_PER_SECOND", defaults.ops_per_second),
            default_n=_read_float(env, "BIGOLENS_DEFAULT_N", defaults.default_n),
        )


def _read_float(env, name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
