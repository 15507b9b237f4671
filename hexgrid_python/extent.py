from hexgrid_python.validation import validate_extent


class Extent:
    """Pixel-space rectangle anchored at the origin"""
    def __init__(self, width, height):
        self.width, self.height = validate_extent((width, height))

    @classmethod
    def from_pair(cls, extent):
        width, height = validate_extent(extent)
        return cls(width, height)

    def as_tuple(self):
        return (self.width, self.height)

    def __eq__(self, other):
        return isinstance(other, Extent) and self.as_tuple() == other.as_tuple()

    def __repr__(self):
        return f"Extent(width={self.width}, height={self.height})"
