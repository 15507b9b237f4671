import math
import numpy as np
import pandas as pd
from collections.abc import Mapping
from hexgrid_python.errors import InvalidPointError, MissingCollaboratorError
from hexgrid_python.validation import finite_coordinate_mask

GEO_KEY_PAIRS = [('lng', 'lat'), ('lon', 'lat'), ('long', 'lat'), ('longitude', 'latitude')]


def detect_geo_keys(record):
    """Find a longitude/latitude key pair in a record, case-insensitively."""
    lowered = {str(k).lower(): k for k in record.keys()}
    for lon_key, lat_key in GEO_KEY_PAIRS:
        if lon_key in lowered and lat_key in lowered:
            return lowered[lon_key], lowered[lat_key]
    return None


def _to_float(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


class PointSource:
    """Normalized view of caller data points with projected pixel coordinates.

    The caller's records are never modified; x and y hold the pixel position of
    each input point (NaN where the point is unusable) and diagnostics hold one
    InvalidPointError per skipped point.
    """

    def __init__(self, points=None, projection=None, geo_keys=None):
        self.projection = projection
        self.geo_keys = tuple(geo_keys) if geo_keys is not None else None
        self.records = self._as_records(points)
        self.n_pts = len(self.records)
        self.x = np.full(self.n_pts, np.nan)
        self.y = np.full(self.n_pts, np.nan)
        self.diagnostics = []
        self._locate_points()

    @staticmethod
    def _as_records(points):
        if points is None:
            return []
        if isinstance(points, pd.DataFrame):
            return points.to_dict('records')
        if isinstance(points, np.ndarray):
            if points.ndim != 2 or points.shape[1] < 2:
                raise ValueError(f"point arrays must have shape (n, 2), got {points.shape}")
            return [{'x': row[0], 'y': row[1]} for row in points]
        return list(points)

    def _project(self, index, lon, lat):
        if self.projection is None:
            raise MissingCollaboratorError(
                f"point {index} has geographic coordinates but no projection was supplied")
        projected = self.projection(lon, lat)
        if projected is None:
            raise InvalidPointError(index, "projection returned no position", self.records[index])
        try:
            px, py = projected
        except (TypeError, ValueError):
            raise InvalidPointError(
                index, f"projection returned {projected!r}, expected an (x, y) pair", self.records[index])
        return px, py

    def _coordinates(self, index, record):
        """Pixel coordinates of one record, or raise InvalidPointError"""
        if isinstance(record, Mapping):
            if self.geo_keys is not None:
                lon_key, lat_key = self.geo_keys
                if lon_key not in record or lat_key not in record:
                    raise InvalidPointError(index, f"missing geographic keys {self.geo_keys}", record)
                lon, lat = _to_float(record[lon_key]), _to_float(record[lat_key])
                if not (math.isfinite(lon) and math.isfinite(lat)):
                    raise InvalidPointError(index, "non-finite geographic coordinates", record)
                return self._project(index, lon, lat)
            if 'x' in record and 'y' in record:
                return record['x'], record['y']
            keys = detect_geo_keys(record)
            if keys is None:
                raise InvalidPointError(index, "missing coordinates", record)
            lon, lat = _to_float(record[keys[0]]), _to_float(record[keys[1]])
            if not (math.isfinite(lon) and math.isfinite(lat)):
                raise InvalidPointError(index, "non-finite geographic coordinates", record)
            return self._project(index, lon, lat)
        try:
            return record[0], record[1]
        except (TypeError, IndexError, KeyError):
            raise InvalidPointError(index, "missing coordinates", record)

    def _locate_points(self):
        for i, record in enumerate(self.records):
            try:
                px, py = self._coordinates(i, record)
                px, py = _to_float(px), _to_float(py)
                if not (math.isfinite(px) and math.isfinite(py)):
                    raise InvalidPointError(i, "non-finite pixel coordinates", record)
            except InvalidPointError as e:
                self.diagnostics.append(e)
                continue
            self.x[i] = px
            self.y[i] = py

    def valid_mask(self):
        return finite_coordinate_mask(self.x, self.y)

    def point_record(self, index, attribute_keys=None):
        """Fresh output record {x, y, <attribute keys>} for one point"""
        out = {'x': float(self.x[index]), 'y': float(self.y[index])}
        if attribute_keys:
            record = self.records[index]
            for key in attribute_keys:
                # Pixel position always wins over same-named input fields
                if key in ('x', 'y'):
                    continue
                out[key] = record.get(key) if isinstance(record, Mapping) else None
        return out
