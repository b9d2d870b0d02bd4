"""GPX parsing into cumulative-distance track points."""

from collections.abc import Iterable

import gpxpy
import gpxpy.gpx

from elevation_profile.distance import haversine_distance
from elevation_profile.models import TrackPoint


def _to_float(value) -> float:
    """Coerce a coordinate or elevation to float; missing or unparseable is 0.0."""
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def build_track_points(segments: Iterable) -> list[TrackPoint]:
    """Stitch segments into one point sequence with cumulative distance.

    The first point of each segment after the first adds no distance, so a
    gap between recordings never shows up as a jump in the profile.
    """
    points: list[TrackPoint] = []
    cumulative = 0.0
    for seg_index, segment in enumerate(segments):
        for pt_index, pt in enumerate(segment.points):
            lat = _to_float(pt.latitude)
            lon = _to_float(pt.longitude)
            ele = _to_float(pt.elevation)

            if points and not (seg_index > 0 and pt_index == 0):
                prev = points[-1]
                cumulative += haversine_distance(prev.latitude, prev.longitude, lat, lon)

            points.append(TrackPoint(longitude=lon, latitude=lat, elevation=ele, distance=cumulative))
    return points


def parse_gpx_document(data: str | bytes) -> gpxpy.gpx.GPX:
    """Parse raw GPX text.

    Raises:
        gpxpy.gpx.GPXException: If the document is malformed.
        UnicodeDecodeError: If bytes are not valid UTF-8.
    """
    if isinstance(data, bytes):
        data = data.decode("utf-8-sig")
    return gpxpy.parse(data)


def iter_segments(gpx: gpxpy.gpx.GPX):
    for track in gpx.tracks:
        yield from track.segments


def parse_gpx_name(gpx: gpxpy.gpx.GPX) -> str | None:
    """Return the document's metadata name, else the first named track."""
    if gpx.name and gpx.name.strip():
        return gpx.name.strip()
    for track in gpx.tracks:
        if track.name and track.name.strip():
            return track.name.strip()
    return None


def parse_gpx(data: str | bytes) -> list[TrackPoint]:
    """Parse GPX text and return its track points in document order."""
    return build_track_points(iter_segments(parse_gpx_document(data)))


def parse_gpx_file(filepath: str) -> list[TrackPoint]:
    """Parse a GPX file and return a list of TrackPoints."""
    with open(filepath, "rb") as f:
        return parse_gpx(f.read())
