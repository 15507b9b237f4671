import warnings
import numpy as np
from typing import List, Optional
from hexgrid_python.coverage import CoverageEstimator
from hexgrid_python.data_source import PointSource
from hexgrid_python.errors import InvalidPointError, InvalidPointWarning
from hexgrid_python.extent import Extent
from hexgrid_python.hex_bin import HexBin
from hexgrid_python.hex_binner import HexBinner
from hexgrid_python.hex_coordinates import HexCoordinates
from hexgrid_python.hex_tiler import HexTiler
from hexgrid_python.weighting import weighted_counts


class HexLayout:
    """Result of one layout call: binned hexagons plus summary values"""
    def __init__(self, layout: List[HexBin], image_centers, extent, hex_radius,
                 n_points=0, diagnostics=None):
        self.layout = layout
        self.image_centers = image_centers
        self.extent = extent
        self.hex_radius = hex_radius
        self.n_points = n_points
        self.diagnostics = list(diagnostics or [])
        self.maximum = 0
        self.maximum_weighted = 0.0
        self._compute_maximums()

    def _compute_maximums(self):
        """Single pass over the entries for both maximums"""
        self.maximum = 0
        self.maximum_weighted = 0.0
        for hex_bin in self.layout:
            if hex_bin.count > self.maximum:
                self.maximum = hex_bin.count
            if hex_bin.datapoints_wt > self.maximum_weighted:
                self.maximum_weighted = hex_bin.datapoints_wt

    @property
    def n_skipped(self):
        return len(self.diagnostics)

    @property
    def n_assigned(self):
        return sum(hex_bin.count for hex_bin in self.layout)

    def __len__(self):
        return len(self.layout)

    def __iter__(self):
        return iter(self.layout)

    def get_bin(self, col, row) -> Optional[HexBin]:
        """Get bin at grid coordinates (col, row)"""
        for hex_bin in self.layout:
            if hex_bin.col == col and hex_bin.row == row:
                return hex_bin
        return None

    def get_occupied_bins(self):
        """Bins holding at least one data point"""
        return [hex_bin for hex_bin in self.layout if hex_bin.is_occupied()]

    def get_edge_bins(self):
        return [hex_bin for hex_bin in self.layout if hex_bin.is_edge()]

    def to_records(self):
        return [hex_bin.to_dict() for hex_bin in self.layout]

    def get_hex_stats(self):
        """
        Get statistics about the layout

        Returns:
            dict: totals, occupancy, edge counts and maximums
        """
        total_hexagons = len(self.layout)
        occupied = self.get_occupied_bins()
        edge = self.get_edge_bins()
        occupied_edge = [hex_bin for hex_bin in occupied if hex_bin.is_edge()]

        stats = {
            'total_hexagons': total_hexagons,
            'image_centers': len(self.image_centers),
            'occupied_hexagons': len(occupied),
            'edge_hexagons': len(edge),
            'occupied_edge_hexagons': len(occupied_edge),
            'n_points': self.n_points,
            'n_assigned': self.n_assigned,
            'n_skipped': self.n_skipped,
            'maximum': self.maximum,
            'maximum_weighted': self.maximum_weighted,
            'occupancy_rate': len(occupied) / total_hexagons if total_hexagons > 0 else 0,
            'mean_cover': float(np.mean([b.cover for b in self.layout])) if total_hexagons > 0 else 0.0,
        }

        return stats


def _extend_selection(gridpoints, selected, steps):
    """Add hexagons within `steps` hex steps of the selected ones"""
    known = set(gridpoints)
    frontier = {g for g, keep in zip(gridpoints, selected) if keep}
    reached = set(frontier)
    for _ in range(steps):
        next_frontier = set()
        for col, row in frontier:
            for neighbor in HexCoordinates.get_neighbors(col, row):
                if neighbor in known and neighbor not in reached:
                    next_frontier.add(neighbor)
        reached |= next_frontier
        frontier = next_frontier
    return np.array([g in reached for g in gridpoints], dtype=bool)


def assemble_layout(extent, hex_radius, points=None, attribute_keys=None, boundary_test=None,
                    projection=None, geo_keys=None, edge_precision=2, grid_extend=0,
                    include_uncovered=False, min_coverage=None, tie_break='lowest',
                    debug=False) -> HexLayout:
    """
    Build a layout: tile, estimate coverage, bin points and weight them.

    Args:
        extent: Extent or (width, height) pair of the pixel area
        hex_radius: Corner radius of the hexagons
        points: Data points (mappings, DataFrame or (n, 2) array), or None
        attribute_keys: Field names copied onto every binned point record
        boundary_test: Geography boundary test, or None for a fully covered extent
        projection: callable (lon, lat) -> (x, y) for geographic points
        geo_keys: Explicit (lon_key, lat_key) names in the point records
        edge_precision: Sample rings used for coverage
        grid_extend: Keep uncovered hexagons within this many steps of covered ones
        include_uncovered: Keep every hexagon of the tiling
        min_coverage: Coverage clamp for weighting, module default if None
        tie_break: 'lowest' or 'highest' grid coordinate wins exact distance ties
        debug: Print stage summaries

    Returns:
        HexLayout
    """
    if not isinstance(extent, Extent):
        extent = Extent.from_pair(extent)
    tiler = HexTiler(extent, hex_radius)
    tiles = tiler.tile()
    gridpoints = [g for g, _ in tiles]
    centers = np.array([c for _, c in tiles], dtype=np.float64).reshape(-1, 2)
    image_centers = [{'x': float(cx), 'y': float(cy)} for cx, cy in centers]

    estimator = CoverageEstimator(hex_radius, edge_precision)
    cover = estimator.estimate(centers, boundary_test)

    if include_uncovered:
        selected = np.ones(len(gridpoints), dtype=bool)
    else:
        selected = cover > 0
        if grid_extend > 0:
            selected = _extend_selection(gridpoints, selected, grid_extend)

    bins = [HexBin(gridpoints[i][0], gridpoints[i][1], float(centers[i, 0]), float(centers[i, 1]),
                   float(cover[i]))
            for i in np.flatnonzero(selected)]

    if debug:
        print(f"Tiling: {len(tiles)} hexagons, {len(bins)} kept, "
              f"{estimator.get_n_samples()} coverage samples per hexagon")

    source = PointSource(points, projection=projection, geo_keys=geo_keys)
    diagnostics = list(source.diagnostics)

    binner = HexBinner(hex_radius, [b.gridpoint for b in bins], [(b.x, b.y) for b in bins],
                       tie_break=tie_break)
    valid = source.valid_mask()
    assignment = binner.assign(source.x, source.y, valid)
    keys = list(attribute_keys) if attribute_keys else None
    for i, hex_index in enumerate(assignment):
        if hex_index >= 0:
            bins[hex_index].datapoints.append(source.point_record(i, keys))
        elif valid[i]:
            diagnostics.append(InvalidPointError(i, "no hexagon inside the geography", source.records[i]))

    weights = weighted_counts([b.count for b in bins], [b.cover for b in bins], min_coverage)
    for hex_bin, weight in zip(bins, weights):
        hex_bin.datapoints_wt = float(weight)

    diagnostics.sort(key=lambda e: e.index)
    if diagnostics:
        warnings.warn(f"{len(diagnostics)} of {source.n_pts} points were skipped; "
                      f"see HexLayout.diagnostics", InvalidPointWarning)

    result = HexLayout(bins, image_centers, extent, tiler.hex_radius,
                       n_points=source.n_pts, diagnostics=diagnostics)
    if debug:
        print(f"Binned {result.n_assigned} of {source.n_pts} points "
              f"(max {result.maximum}, weighted max {result.maximum_weighted:.3f})")
    return result
