class HexBin:
    """Hexagon container class with public fields to keep accessors simple"""
    def __init__(self, col, row, x, y, cover=1.0):
        # Offset grid coordinates (col, row)
        self.col = col
        self.row = row
        # Pixel center of this hex
        self.x = x
        self.y = y
        self.cover = cover
        self.datapoints = []
        self.datapoints_wt = 0.0

    @property
    def gridpoint(self):
        return (self.col, self.row)

    @property
    def count(self):
        return len(self.datapoints)

    def is_edge(self):
        return self.cover < 1.0

    def is_occupied(self):
        return len(self.datapoints) > 0

    def to_dict(self):
        """Plain-dict view with fresh point lists"""
        return {
            'x': self.x,
            'y': self.y,
            'cover': self.cover,
            'gridpoint': self.gridpoint,
            'datapoints': [dict(p) for p in self.datapoints],
            'datapoints_wt': self.datapoints_wt,
        }

    def __repr__(self):
        return (f"HexBin(gridpoint={self.gridpoint}, center=({self.x:.3f}, {self.y:.3f}), "
                f"cover={self.cover:.3f}, count={self.count}, weighted={self.datapoints_wt:.3f})")
