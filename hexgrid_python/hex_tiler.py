import math
from typing import List, Tuple
from hexgrid_python.extent import Extent
from hexgrid_python.hex_coordinates import HexCoordinates
from hexgrid_python.validation import validate_hex_radius


class HexTiler:
    """Regular pointy-top hexagon tiling over a pixel extent"""
    def __init__(self, extent: Extent, hex_radius):
        self.extent = extent
        self.hex_radius = validate_hex_radius(hex_radius)
        self.dx = HexCoordinates.column_spacing(self.hex_radius)
        self.dy = HexCoordinates.row_spacing(self.hex_radius)

    def get_n_rows(self):
        # A row intersects the extent while its top corner is above the bottom edge
        return int(math.ceil((self.extent.height + self.hex_radius) / self.dy))

    def get_n_cols(self, row):
        # A hexagon intersects the extent while its left edge is left of the right edge
        half = self.dx / 2.0
        offset = HexCoordinates.row_offset(row, self.hex_radius)
        return int(math.ceil((self.extent.width + half - offset) / self.dx))

    def tile(self) -> List[Tuple[Tuple[int, int], Tuple[float, float]]]:
        """
        Generate every hexagon whose body intersects the extent.

        Hexagons are produced row-major, top to bottom then left to right. Hexagons
        extending past the extent edge are kept.

        Returns:
            List of ((col, row), (x, y)) pairs
        """
        tiles = []
        for row in range(self.get_n_rows()):
            for col in range(self.get_n_cols(row)):
                tiles.append(((col, row), HexCoordinates.offset_to_pixel(col, row, self.hex_radius)))
        return tiles
