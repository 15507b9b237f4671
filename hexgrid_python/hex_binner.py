import numpy as np
from hexgrid_python.hex_coordinates import HexCoordinates
from hexgrid_python.validation import validate_hex_radius

TIE_BREAKS = ('lowest', 'highest')


class HexBinner:
    """Nearest-center assignment of pixel points to a set of hexagons.

    Lookup goes through the offset grid itself: the 3x3 window of cells around a
    point always contains its nearest lattice center, so a point normally costs
    nine distance checks. When that lattice hexagon is not among the hexagons
    being binned (outside the tiling or filtered out by coverage) the point falls
    back to a scan over all of them, so no point is dropped.
    """
    def __init__(self, hex_radius, gridpoints, centers, tie_break='lowest'):
        if tie_break not in TIE_BREAKS:
            raise ValueError(f"tie_break must be one of {TIE_BREAKS}, got {tie_break!r}")
        self.hex_radius = validate_hex_radius(hex_radius)
        self.tie_break = tie_break
        self.gridpoints = [tuple(g) for g in gridpoints]
        self.centers = np.asarray(centers, dtype=np.float64).reshape(-1, 2)
        if len(self.gridpoints) != len(self.centers):
            raise ValueError("gridpoints and centers must have the same length")
        # Bucket grid keyed by (col, row)
        self.index = {g: i for i, g in enumerate(self.gridpoints)}

    def _pick(self, candidates):
        """Choose among (squared distance, gridpoint, index) candidates"""
        best_d2 = min(c[0] for c in candidates)
        tied = [c for c in candidates if c[0] == best_d2]
        if self.tie_break == 'lowest':
            return min(tied, key=lambda c: c[1])[2]
        return max(tied, key=lambda c: c[1])[2]

    def _lattice_nearest(self, x, y):
        candidates = []
        for col, row in HexCoordinates.candidate_cells(x, y, self.hex_radius):
            cx, cy = HexCoordinates.offset_to_pixel(col, row, self.hex_radius)
            d2 = (cx - x) ** 2 + (cy - y) ** 2
            candidates.append((d2, (col, row), -1))
        best_d2 = min(c[0] for c in candidates)
        return [c for c in candidates if c[0] == best_d2]

    def _scan_nearest(self, x, y):
        d2 = (self.centers[:, 0] - x) ** 2 + (self.centers[:, 1] - y) ** 2
        tied = np.flatnonzero(d2 == d2.min())
        return self._pick([(d2[i], self.gridpoints[i], int(i)) for i in tied])

    def nearest(self, x, y):
        """
        Index of the hexagon nearest to (x, y).

        Ties on exact distance go to the lexicographically smallest (col, row),
        or the largest with tie_break='highest'.

        Returns:
            Index into gridpoints, or -1 when there are no hexagons
        """
        if len(self.gridpoints) == 0:
            return -1
        tied = self._lattice_nearest(x, y)
        known = [(d2, g, self.index[g]) for d2, g, _ in tied if g in self.index]
        if len(known) == len(tied):
            return self._pick(known)
        # Part of the lattice tie lies outside the binned set; the scan settles it
        return self._scan_nearest(x, y)

    def assign(self, x, y, valid=None):
        """
        Assign points to hexagons.

        Args:
            x, y: Arrays of pixel coordinates
            valid: Optional boolean mask; points where it is False are skipped

        Returns:
            np.ndarray of hexagon indices, -1 for skipped points
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        if valid is None:
            valid = np.isfinite(x) & np.isfinite(y)
        assignment = np.full(len(x), -1, dtype=np.int64)
        for i in range(len(x)):
            if not valid[i]:
                continue
            assignment[i] = self.nearest(x[i], y[i])
        return assignment

    def group(self, assignment):
        """
        Group point indices by hexagon, preserving input order.

        Returns:
            Dict mapping gridpoint -> list of point indices
        """
        groups = {}
        for i, hex_index in enumerate(assignment):
            if hex_index < 0:
                continue
            groups.setdefault(self.gridpoints[hex_index], []).append(i)
        return groups
