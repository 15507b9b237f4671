"""
Coverage-based weighting of per-hexagon point counts.

A hexagon only partly inside the study area collects fewer points than an
interior hexagon of the same density. Dividing its raw count by its coverage
restores a density-comparable estimate:

    weighted = n / max(coverage, MIN_COVERAGE)

Empty hexagons and hexagons with zero coverage weigh 0. Interior hexagons
(coverage == 1) are left unchanged.
"""

import numpy as np
from hexgrid_python.validation import validate_min_coverage

# Lower clamp on coverage before dividing
MIN_COVERAGE = 1e-6


def set_min_coverage(value: float):
    """Set the module-wide coverage clamp.

    Args:
        value: Float in (0, 1)
    """
    global MIN_COVERAGE
    MIN_COVERAGE = validate_min_coverage(value)


def get_min_coverage() -> float:
    """Get the current module-wide coverage clamp."""
    return MIN_COVERAGE


def weighted_count(n, coverage, min_coverage=None) -> float:
    """
    Coverage-corrected count for a single hexagon.

    Args:
        n: Raw number of points in the hexagon
        coverage: Coverage fraction in [0, 1]
        min_coverage: Clamp override, defaults to MIN_COVERAGE

    Returns:
        Weighted count (0.0 for empty or uncovered hexagons)
    """
    return float(weighted_counts([n], [coverage], min_coverage)[0])


def weighted_counts(counts: np.ndarray, coverage: np.ndarray, min_coverage=None) -> np.ndarray:
    """Vectorized weighted_count over aligned arrays of counts and coverage."""
    counts = np.asarray(counts, dtype=np.float64)
    coverage = np.asarray(coverage, dtype=np.float64)
    clamp = MIN_COVERAGE if min_coverage is None else min_coverage
    safe = np.maximum(np.minimum(coverage, 1.0), clamp)
    out = counts / safe
    out[(counts == 0) | (coverage <= 0)] = 0.0
    return out
