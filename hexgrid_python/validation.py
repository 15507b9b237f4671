import math
import numpy as np
from typing import Tuple
from hexgrid_python.errors import ConfigurationError


def _is_positive_number(value) -> bool:
    if isinstance(value, bool):
        return False
    try:
        value = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and value > 0


def validate_extent(extent) -> Tuple[float, float]:
    """
    Validate a pixel extent.

    Args:
        extent: (width, height) pair, both finite and positive

    Returns:
        Tuple of (width, height) as floats

    Raises:
        ConfigurationError: if the extent is missing or malformed
    """
    if extent is None:
        raise ConfigurationError("extent is required")
    try:
        width, height = extent
    except (TypeError, ValueError):
        raise ConfigurationError(f"extent must be a (width, height) pair, got {extent!r}")
    if not (_is_positive_number(width) and _is_positive_number(height)):
        raise ConfigurationError(f"extent width and height must be positive, got {extent!r}")
    return float(width), float(height)


def validate_hex_radius(hex_radius) -> float:
    """Validate the hexagon corner radius (finite, positive)."""
    if hex_radius is None:
        raise ConfigurationError("hex_radius is required")
    if not _is_positive_number(hex_radius):
        raise ConfigurationError(f"hex_radius must be positive, got {hex_radius!r}")
    return float(hex_radius)


def validate_edge_precision(edge_precision) -> int:
    """Number of sample rings used for coverage; an integer >= 1."""
    if isinstance(edge_precision, bool) or not isinstance(edge_precision, (int, np.integer)):
        raise ConfigurationError(f"edge_precision must be an integer, got {edge_precision!r}")
    if edge_precision < 1:
        raise ConfigurationError(f"edge_precision must be >= 1, got {edge_precision}")
    return int(edge_precision)


def validate_grid_extend(grid_extend) -> int:
    if isinstance(grid_extend, bool) or not isinstance(grid_extend, (int, np.integer)):
        raise ConfigurationError(f"grid_extend must be an integer, got {grid_extend!r}")
    if grid_extend < 0:
        raise ConfigurationError(f"grid_extend must be >= 0, got {grid_extend}")
    return int(grid_extend)


def validate_min_coverage(min_coverage) -> float:
    if not _is_positive_number(min_coverage) or float(min_coverage) >= 1.0:
        raise ConfigurationError(f"min_coverage must be in (0, 1), got {min_coverage!r}")
    return float(min_coverage)


def finite_coordinate_mask(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """
    Boolean mask of points whose projected coordinates are usable.

    Args:
        x: X pixel coordinates (NaN where missing)
        y: Y pixel coordinates (NaN where missing)

    Returns:
        Boolean array, True where both coordinates are finite
    """
    return np.isfinite(x) & np.isfinite(y)
