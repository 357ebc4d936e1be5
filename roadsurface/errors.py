"""Exceptions raised while validating a road surface build."""


class RoadSurfaceError(ValueError):
    """Base class for every construction-time failure."""


class TrackLengthMismatchError(RoadSurfaceError):
    def __init__(self, left_len: int, right_len: int):
        self.left_len = left_len
        self.right_len = right_len
        super().__init__(
            f"Left and right tracks must have the same number of samples "
            f"(left={left_len}, right={right_len})")


class LaneWidthError(RoadSurfaceError):
    def __init__(self, lane_width: float, track_width: float):
        self.lane_width = lane_width
        self.track_width = track_width
        super().__init__(
            f"Lane width ({lane_width} m) must be larger than the track "
            f"width ({track_width} m)")


class IndexOverflowError(RoadSurfaceError):
    def __init__(self, vertex_count: int, index_dtype: str, limit: int):
        self.vertex_count = vertex_count
        self.index_dtype = index_dtype
        self.limit = limit
        super().__init__(
            f"Mesh needs {vertex_count} vertices but {index_dtype} indices "
            f"address at most {limit}; lower length_subdivisions, shorten "
            f"the tracks or use index_dtype='uint32'")


class ConfigurationError(RoadSurfaceError):
    """Any other invalid geometry setting or track content."""
