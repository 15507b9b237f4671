import numpy as np
from hexgrid_python.boundary import evaluate_boundary
from hexgrid_python.hex_coordinates import HexCoordinates
from hexgrid_python.validation import validate_edge_precision, validate_hex_radius


class CoverageEstimator:
    """Estimates the share of each hexagon lying inside the geography.

    Coverage is sampled, not clipped: each hexagon is sampled at a fixed lattice
    of 3k(k+1)+1 interior points (k = edge_precision) and the coverage is the
    fraction of samples the boundary test accepts. Raising edge_precision trades
    speed for accuracy.
    """
    def __init__(self, hex_radius, edge_precision=2):
        self.hex_radius = validate_hex_radius(hex_radius)
        self.edge_precision = validate_edge_precision(edge_precision)
        self.offsets = HexCoordinates.sample_offsets(self.hex_radius, self.edge_precision)

    def get_n_samples(self):
        return len(self.offsets)

    def estimate(self, centers, boundary_test):
        """
        Compute coverage for many hexagons in one boundary query.

        Args:
            centers: Sequence of (x, y) hexagon centers
            boundary_test: callable (x, y) -> bool or object with contains_points;
                None means the whole extent is inside

        Returns:
            np.ndarray of coverage fractions in [0, 1], one per center
        """
        centers = np.asarray(centers, dtype=np.float64).reshape(-1, 2)
        if boundary_test is None:
            return np.ones(len(centers))
        if len(centers) == 0:
            return np.zeros(0)

        n_samples = self.get_n_samples()
        # (n_hex, n_samples, 2) -> flat list of sample points, hexagon-major
        samples = centers[:, None, :] + self.offsets[None, :, :]
        inside = evaluate_boundary(boundary_test, samples.reshape(-1, 2))
        counts = inside.reshape(len(centers), n_samples).sum(axis=1)
        return counts / float(n_samples)

    def estimate_one(self, cx, cy, boundary_test):
        return float(self.estimate([(cx, cy)], boundary_test)[0])
