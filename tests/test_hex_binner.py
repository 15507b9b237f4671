"""
Tests for nearest-center point binning and coverage weighting.

Run with: pytest tests/test_hex_binner.py
"""

import math
import numpy as np
import pytest
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from hexgrid_python.extent import Extent
from hexgrid_python.errors import ConfigurationError
from hexgrid_python.hex_binner import HexBinner
from hexgrid_python.hex_tiler import HexTiler
from hexgrid_python import weighting
from hexgrid_python.weighting import (
    get_min_coverage,
    set_min_coverage,
    weighted_count,
    weighted_counts,
)

RADIUS = 4.0
DX = RADIUS * math.sqrt(3)


@pytest.fixture
def tiles():
    return HexTiler(Extent(100, 100), RADIUS).tile()


@pytest.fixture
def binner(tiles):
    return HexBinner(RADIUS, [g for g, _ in tiles], [c for _, c in tiles])


class TestHexBinner:
    """Test point assignment"""

    def test_center_maps_to_own_hexagon(self, binner, tiles):
        for i, (gridpoint, (x, y)) in enumerate(tiles[::17]):
            assert binner.gridpoints[binner.nearest(x, y)] == gridpoint

    def test_matches_brute_force(self, binner):
        rng = np.random.RandomState(42)
        points = rng.uniform(-10, 110, size=(300, 2))
        assignment = binner.assign(points[:, 0], points[:, 1])
        for (x, y), hex_index in zip(points, assignment):
            d2 = ((binner.centers - [x, y]) ** 2).sum(axis=1)
            assert d2[hex_index] == pytest.approx(d2.min())

    def test_tie_breaks_to_lowest_gridpoint(self, binner):
        # Exactly halfway between (0, 0) and (1, 0)
        hex_index = binner.nearest(DX / 2.0, 0.0)
        assert binner.gridpoints[hex_index] == (0, 0)

    def test_tie_break_highest(self, tiles):
        binner = HexBinner(RADIUS, [g for g, _ in tiles], [c for _, c in tiles], tie_break='highest')
        hex_index = binner.nearest(DX / 2.0, 0.0)
        assert binner.gridpoints[hex_index] == (1, 0)

    def test_invalid_tie_break(self, tiles):
        with pytest.raises(ValueError):
            HexBinner(RADIUS, [g for g, _ in tiles], [c for _, c in tiles], tie_break='random')

    def test_point_outside_tiling_is_kept(self, binner):
        hex_index = binner.nearest(-50.0, -50.0)
        assert binner.gridpoints[hex_index] == (0, 0)

    def test_subset_of_hexagons(self, tiles):
        # Only hexagons from column 5 onwards take part
        subset = [(g, c) for g, c in tiles if g[0] >= 5]
        binner = HexBinner(RADIUS, [g for g, _ in subset], [c for _, c in subset])
        hex_index = binner.nearest(1.0, 1.0)
        d2 = ((binner.centers - [1.0, 1.0]) ** 2).sum(axis=1)
        assert hex_index == int(np.argmin(d2))
        assert binner.gridpoints[hex_index][0] == 5

    def test_non_finite_points_are_skipped(self, binner):
        x = np.array([10.0, np.nan, 20.0, np.inf])
        y = np.array([10.0, 5.0, np.nan, 3.0])
        assignment = binner.assign(x, y)
        assert assignment[0] >= 0
        assert list(assignment[1:]) == [-1, -1, -1]

    def test_empty_binner(self):
        binner = HexBinner(RADIUS, [], [])
        assert binner.nearest(1.0, 1.0) == -1

    def test_group_preserves_input_order(self, binner):
        x = np.array([0.1, 50.0, -0.1, 0.0])
        y = np.array([0.0, 50.0, 0.1, -0.2])
        groups = binner.group(binner.assign(x, y))
        assert groups[(0, 0)] == [0, 2, 3]
        assert sum(len(v) for v in groups.values()) == 4


class TestWeighting:
    """Test coverage-corrected counts"""

    def test_empty_hexagon(self):
        assert weighted_count(0, 0.5) == 0.0
        assert weighted_count(0, 1.0) == 0.0

    def test_uncovered_hexagon(self):
        assert weighted_count(3, 0.0) == 0.0

    def test_interior_hexagon_unchanged(self):
        assert weighted_count(4, 1.0) == 4.0

    def test_edge_hexagon_up_weighted(self):
        assert weighted_count(2, 0.5) == pytest.approx(4.0)
        assert weighted_count(1, 3 / 19) > 1

    def test_clamp(self):
        assert weighted_count(1, 1e-9) == pytest.approx(1e6)
        assert weighted_count(1, 1e-9, min_coverage=0.01) == pytest.approx(100.0)

    def test_set_min_coverage(self):
        original = get_min_coverage()
        try:
            set_min_coverage(0.1)
            assert weighting.MIN_COVERAGE == 0.1
            assert weighted_count(1, 0.01) == pytest.approx(10.0)
        finally:
            set_min_coverage(original)
        assert get_min_coverage() == original

    def test_set_min_coverage_rejects_bad_values(self):
        with pytest.raises(ConfigurationError):
            set_min_coverage(0)
        with pytest.raises(ConfigurationError):
            set_min_coverage(1.5)
        with pytest.raises(ConfigurationError):
            set_min_coverage(1.0)

    def test_vectorized_matches_scalar(self):
        counts = np.array([0, 3, 2, 5, 1])
        coverage = np.array([0.4, 0.0, 1.0, 0.25, 1e-9])
        expected = [weighted_count(n, c) for n, c in zip(counts, coverage)]
        assert weighted_counts(counts, coverage) == pytest.approx(expected)
