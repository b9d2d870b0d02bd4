from collections.abc import Sequence

from elevation_profile.models import Track, TrackPoint


def calculate_elevation_gain(points: Sequence[TrackPoint]) -> float:
    """Sum of positive elevation changes between consecutive points."""
    gain = 0.0
    for i in range(1, len(points)):
        delta = points[i].elevation - points[i - 1].elevation
        if delta > 0:
            gain += delta
    return gain


def default_track_name(position: int) -> str:
    """Positional label for a track without a name, 1-based."""
    return f"Track {position + 1}"


def aggregate_track(
    points: Sequence[TrackPoint],
    name: str | None = None,
    position: int = 0,
    source: str | None = None,
) -> Track:
    """Build a Track summary from fully parsed points.

    Args:
        points: Non-empty point sequence with cumulative distances
        name: Name from the source document, if any
        position: Index of the source in the requested list (for the default name)
        source: Identifier the points were loaded from

    Raises:
        ValueError: If points is empty.
    """
    if not points:
        raise ValueError("Cannot aggregate a track with no points")

    min_elevation = points[0].elevation
    max_elevation = points[0].elevation
    for pt in points:
        if pt.elevation < min_elevation:
            min_elevation = pt.elevation
        if pt.elevation > max_elevation:
            max_elevation = pt.elevation

    return Track(
        name=name or default_track_name(position),
        points=tuple(points),
        total_distance=points[-1].distance,
        elevation_gain=calculate_elevation_gain(points),
        min_elevation=min_elevation,
        max_elevation=max_elevation,
        source=source,
    )
