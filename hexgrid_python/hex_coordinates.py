import numpy as np
import math

SQRT3 = math.sqrt(3)


class HexCoordinates:
    """Utility class for the odd-row offset hexagon grid (pointy-top orientation)"""

    @staticmethod
    def column_spacing(hex_radius):
        """Horizontal distance between adjacent centers in one row"""
        return hex_radius * SQRT3

    @staticmethod
    def row_spacing(hex_radius):
        """Vertical distance between adjacent rows"""
        return hex_radius * 1.5

    @staticmethod
    def row_offset(row, hex_radius):
        """Horizontal shift applied to odd rows"""
        return HexCoordinates.column_spacing(hex_radius) / 2.0 if row % 2 else 0.0

    @staticmethod
    def offset_to_pixel(col, row, hex_radius):
        """
        Convert offset grid coordinates to the pixel center of the hexagon

        Args:
            col, row: Grid coordinates
            hex_radius: Corner radius of the hexagons

        Returns:
            (x, y): Pixel coordinates
        """
        x = col * HexCoordinates.column_spacing(hex_radius) + HexCoordinates.row_offset(row, hex_radius)
        y = row * HexCoordinates.row_spacing(hex_radius)
        return x, y

    @staticmethod
    def candidate_cells(x, y, hex_radius):
        """
        Offset coordinates of the 3x3 window of hexagons around a pixel position.

        The nearest lattice center to (x, y) is always one of these.

        Returns:
            List of (col, row) tuples
        """
        dx = HexCoordinates.column_spacing(hex_radius)
        dy = HexCoordinates.row_spacing(hex_radius)
        row0 = int(round(y / dy))
        cells = []
        for row in (row0 - 1, row0, row0 + 1):
            col0 = int(round((x - HexCoordinates.row_offset(row, hex_radius)) / dx))
            for col in (col0 - 1, col0, col0 + 1):
                cells.append((col, row))
        return cells

    @staticmethod
    def hex_corners(cx, cy, hex_radius):
        """
        Six corners of a pointy-top hexagon, clockwise from the top corner

        Returns:
            np.ndarray of shape (6, 2)
        """
        angles = np.arange(6) * math.pi / 3.0
        xs = cx + np.sin(angles) * hex_radius
        ys = cy - np.cos(angles) * hex_radius
        return np.column_stack([xs, ys])

    @staticmethod
    def sample_offsets(hex_radius, n_rings):
        """
        Deterministic sample lattice inside a hexagon, relative to its center.

        A triangular lattice of n_rings rings around the center, aligned with the
        hexagon corners and scaled so the outer ring sits at n_rings/(n_rings+1) of
        the corner radius. One ring gives the center plus the six points halfway
        toward each corner.

        Args:
            hex_radius: Corner radius of the hexagons
            n_rings: Number of rings (>= 1)

        Returns:
            np.ndarray of shape (3 * n_rings * (n_rings + 1) + 1, 2)
        """
        step = hex_radius / (n_rings + 1)
        # Lattice basis along two adjacent corner directions (top and top-right)
        u = np.array([0.0, -1.0]) * step
        v = np.array([SQRT3 / 2.0, -0.5]) * step
        offsets = []
        for q in range(-n_rings, n_rings + 1):
            r1 = max(-n_rings, -q - n_rings)
            r2 = min(n_rings, -q + n_rings)
            for r in range(r1, r2 + 1):
                offsets.append(q * u + r * v)
        return np.array(offsets)

    @staticmethod
    def get_neighbors(col, row):
        """
        Get the 6 neighboring offset coordinates

        Args:
            col, row: Hexagon coordinates

        Returns:
            List of (col, row) coordinates for neighbors
        """
        if row % 2:
            directions = [(1, 0), (1, -1), (0, -1), (-1, 0), (0, 1), (1, 1)]
        else:
            directions = [(1, 0), (0, -1), (-1, -1), (-1, 0), (-1, 1), (0, 1)]

        neighbors = []
        for dc, dr in directions:
            neighbors.append((col + dc, row + dr))

        return neighbors
