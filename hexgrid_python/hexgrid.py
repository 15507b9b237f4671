from hexgrid_python.boundary import geojson_boundary_hook
from hexgrid_python.errors import ConfigurationError, MissingCollaboratorError
from hexgrid_python.extent import Extent
from hexgrid_python.hex_binner import TIE_BREAKS
from hexgrid_python.layout import HexLayout, assemble_layout
from hexgrid_python.validation import (
    validate_edge_precision,
    validate_grid_extend,
    validate_hex_radius,
    validate_min_coverage,
)


class HexGrid:
    """Configured hexagonal layout builder.

    Usage:
        grid = HexGrid(extent=(100, 100), hex_radius=4, geography=geo, projection=proj)
        result = grid(cities, ['Name', 'Population'])
        result.layout, result.image_centers, result.maximum, result.maximum_weighted

    The geography is opaque to the grid: boundary_hook(geography, projection,
    extent) turns it into a boundary test. The default hook accepts a boundary
    test as-is or a GeoJSON-like mapping in lon/lat. Without a geography every
    hexagon is fully covered.
    """
    def __init__(self, extent=None, hex_radius=None, geography=None, projection=None,
                 boundary_hook=geojson_boundary_hook, geo_keys=None, edge_precision=2,
                 grid_extend=0, include_uncovered=False, min_coverage=None,
                 tie_break='lowest', debug=False):
        self.extent = Extent.from_pair(extent)
        self.hex_radius = validate_hex_radius(hex_radius)
        self.geography = geography
        self.projection = projection
        self.boundary_hook = boundary_hook
        if geo_keys is not None and len(tuple(geo_keys)) != 2:
            raise ConfigurationError(f"geo_keys must be a (lon_key, lat_key) pair, got {geo_keys!r}")
        self.geo_keys = tuple(geo_keys) if geo_keys is not None else None
        self.edge_precision = validate_edge_precision(edge_precision)
        self.grid_extend = validate_grid_extend(grid_extend)
        self.include_uncovered = bool(include_uncovered)
        self.min_coverage = validate_min_coverage(min_coverage) if min_coverage is not None else None
        if tie_break not in TIE_BREAKS:
            raise ConfigurationError(f"tie_break must be one of {TIE_BREAKS}, got {tie_break!r}")
        self.tie_break = tie_break
        self.debug = debug

    def boundary_test(self):
        """Boundary test for the configured geography, None when there is none"""
        if self.geography is None:
            return None
        if self.boundary_hook is None:
            raise MissingCollaboratorError("a geography was supplied without a boundary hook")
        return self.boundary_hook(self.geography, self.projection, self.extent)

    def __call__(self, points=None, attribute_keys=None) -> HexLayout:
        """
        Lay out the hexagons and bin the points.

        Args:
            points: Sequence of mappings with x/y or lon/lat fields, a DataFrame,
                an (n, 2) array of pixel coordinates, or None for a bare tiling
            attribute_keys: Field names copied onto each binned point record

        Returns:
            HexLayout
        """
        if isinstance(attribute_keys, str):
            attribute_keys = [attribute_keys]
        return assemble_layout(
            self.extent,
            self.hex_radius,
            points=points,
            attribute_keys=attribute_keys,
            boundary_test=self.boundary_test(),
            projection=self.projection,
            geo_keys=self.geo_keys,
            edge_precision=self.edge_precision,
            grid_extend=self.grid_extend,
            include_uncovered=self.include_uncovered,
            min_coverage=self.min_coverage,
            tie_break=self.tie_break,
            debug=self.debug,
        )


def hexgrid(extent, hex_radius, **kwargs) -> HexGrid:
    """Shorthand for HexGrid(extent=..., hex_radius=..., **kwargs)"""
    return HexGrid(extent=extent, hex_radius=hex_radius, **kwargs)
