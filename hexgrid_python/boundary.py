"""
Boundary tests used to estimate hexagon coverage.

A boundary test answers "is this pixel inside the geography". Two forms are
accepted everywhere in the package:
- a plain callable (x, y) -> bool
- an object exposing contains_points(xy) -> boolean array, evaluated in bulk

This module provides:
- PolygonBoundary: pixel-space polygons with holes, backed by matplotlib Path
- MaskBoundary: a pre-rasterized boolean image of the geography
- rasterize_boundary: turns any boundary test into a MaskBoundary
- geojson_boundary_hook: the default hook turning an in-memory GeoJSON-like
  mapping plus a projection into a PolygonBoundary
"""

import numpy as np
from typing import Callable, List, Optional, Sequence
from matplotlib.path import Path
from hexgrid_python.errors import ConfigurationError, MissingCollaboratorError


def evaluate_boundary(boundary_test, xy: np.ndarray) -> np.ndarray:
    """Evaluate a boundary test on an (n, 2) array of pixel points.

    Args:
        boundary_test: callable (x, y) -> bool, or object with contains_points
        xy: Pixel coordinates

    Returns:
        Boolean array of length n
    """
    xy = np.asarray(xy, dtype=np.float64).reshape(-1, 2)
    if hasattr(boundary_test, 'contains_points'):
        return np.asarray(boundary_test.contains_points(xy), dtype=bool)
    return np.fromiter((bool(boundary_test(x, y)) for x, y in xy), dtype=bool, count=len(xy))


def is_boundary_test(obj) -> bool:
    return hasattr(obj, 'contains_points') or callable(obj)


class PolygonBoundary:
    """Union of pixel-space polygons, each an exterior ring with optional holes"""
    def __init__(self, polygons: Sequence[Sequence[Sequence[Sequence[float]]]]):
        self.polygons = []
        for rings in polygons:
            if len(rings) == 0:
                continue
            exterior = self._ring_path(rings[0])
            holes = [self._ring_path(ring) for ring in rings[1:]]
            self.polygons.append((exterior, holes))

    @staticmethod
    def _ring_path(ring):
        vertices = np.asarray(ring, dtype=np.float64)
        if vertices.ndim != 2 or vertices.shape[0] < 3 or vertices.shape[1] < 2:
            raise ConfigurationError(f"polygon rings need at least three (x, y) vertices, got shape {vertices.shape}")
        return Path(vertices[:, :2])

    def contains_points(self, xy):
        xy = np.asarray(xy, dtype=np.float64).reshape(-1, 2)
        inside = np.zeros(len(xy), dtype=bool)
        for exterior, holes in self.polygons:
            in_polygon = exterior.contains_points(xy)
            for hole in holes:
                in_polygon &= ~hole.contains_points(xy)
            inside |= in_polygon
        return inside

    def __call__(self, x, y):
        return bool(self.contains_points([[x, y]])[0])

    def get_n_polygons(self):
        return len(self.polygons)


class MaskBoundary:
    """Boolean raster of the geography; mask[row, col] covers pixel (col, row)"""
    def __init__(self, mask):
        mask = np.asarray(mask, dtype=bool)
        if mask.ndim != 2:
            raise ConfigurationError(f"boundary mask must be two-dimensional, got shape {mask.shape}")
        self.mask = mask

    def contains_points(self, xy):
        xy = np.asarray(xy, dtype=np.float64).reshape(-1, 2)
        height, width = self.mask.shape
        inside = np.zeros(len(xy), dtype=bool)
        finite = np.isfinite(xy).all(axis=1)
        cols = np.floor(np.where(finite, xy[:, 0], -1)).astype(np.int64)
        rows = np.floor(np.where(finite, xy[:, 1], -1)).astype(np.int64)
        in_image = finite & (cols >= 0) & (cols < width) & (rows >= 0) & (rows < height)
        inside[in_image] = self.mask[rows[in_image], cols[in_image]]
        return inside

    def __call__(self, x, y):
        return bool(self.contains_points([[x, y]])[0])

    def coverage_ratio(self):
        """Fraction of the raster lying inside the geography"""
        return float(self.mask.mean()) if self.mask.size else 0.0


def rasterize_boundary(boundary_test, extent) -> MaskBoundary:
    """
    Rasterize a boundary test over the extent, sampling each pixel at its center.

    Args:
        boundary_test: callable or object with contains_points
        extent: Extent or (width, height) pair

    Returns:
        MaskBoundary of shape (ceil(height), ceil(width))
    """
    width, height = extent.as_tuple() if hasattr(extent, 'as_tuple') else extent
    n_cols = int(np.ceil(width))
    n_rows = int(np.ceil(height))
    cols, rows = np.meshgrid(np.arange(n_cols) + 0.5, np.arange(n_rows) + 0.5)
    xy = np.column_stack([cols.ravel(), rows.ravel()])
    inside = evaluate_boundary(boundary_test, xy)
    return MaskBoundary(inside.reshape(n_rows, n_cols))


def _geometry_polygons(geometry) -> List[list]:
    """Collect polygon ring lists (geographic coordinates) from a GeoJSON-like mapping"""
    geo_type = geometry.get('type')
    if geo_type == 'FeatureCollection':
        polygons = []
        for feature in geometry.get('features', []):
            polygons.extend(_geometry_polygons(feature))
        return polygons
    if geo_type == 'Feature':
        inner = geometry.get('geometry')
        return _geometry_polygons(inner) if inner else []
    if geo_type == 'GeometryCollection':
        polygons = []
        for inner in geometry.get('geometries', []):
            polygons.extend(_geometry_polygons(inner))
        return polygons
    if geo_type == 'Polygon':
        return [geometry['coordinates']]
    if geo_type == 'MultiPolygon':
        return list(geometry['coordinates'])
    raise ConfigurationError(f"unsupported geography type: {geo_type!r}")


def geojson_boundary_hook(geography, projection: Optional[Callable], extent=None):
    """
    Default hook deriving a boundary test from the configured geography.

    A geography that already is a boundary test is returned unchanged. A
    GeoJSON-like mapping is projected ring by ring into pixel space.

    Args:
        geography: boundary test, or GeoJSON-like mapping in lon/lat
        projection: callable (lon, lat) -> (x, y)
        extent: unused here, part of the hook signature

    Returns:
        Boundary test usable by the coverage estimator

    Raises:
        MissingCollaboratorError: mapping given without a projection
        ConfigurationError: unsupported geography
    """
    if isinstance(geography, dict):
        if projection is None:
            raise MissingCollaboratorError("a projection is required to derive a boundary from a geographic geometry")
        projected = []
        for rings in _geometry_polygons(geography):
            projected.append([[projection(pt[0], pt[1]) for pt in ring] for ring in rings])
        return PolygonBoundary(projected)
    if is_boundary_test(geography):
        return geography
    raise ConfigurationError(f"cannot derive a boundary test from geography of type {type(geography).__name__}")
