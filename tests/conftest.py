import os

import pytest

from elevation_profile import config
from elevation_profile.analyzer import aggregate_track
from elevation_profile.hover import HoverBus, RecordingSurface
from elevation_profile.models import TrackPoint
from elevation_profile.profile import ProfileController

SAMPLE_GPX_PATH = os.path.join(
    os.path.dirname(__file__), "functional", "data", "sample_ride.gpx"
)


def gpx_document(segments: list[list[tuple]], name: str | None = None) -> str:
    """Build a GPX 1.1 document from (lat, lon, ele) tuples per segment."""
    metadata = f"<metadata><name>{name}</name></metadata>" if name else ""
    segs = []
    for segment in segments:
        pts = []
        for lat, lon, ele in segment:
            ele_xml = f"<ele>{ele}</ele>" if ele is not None else ""
            pts.append(f'<trkpt lat="{lat}" lon="{lon}">{ele_xml}</trkpt>')
        segs.append("<trkseg>" + "".join(pts) + "</trkseg>")
    return (
        '<?xml version="1.0"?>'
        '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">'
        f"{metadata}<trk>{''.join(segs)}</trk></gpx>"
    )


def make_track(distances: list[float], elevations: list[float], name: str | None = None):
    """Track with the given cumulative distances and elevations along a meridian."""
    points = [
        TrackPoint(longitude=-122.0, latitude=37.0 + i * 0.001, elevation=ele, distance=dist)
        for i, (dist, ele) in enumerate(zip(distances, elevations))
    ]
    return aggregate_track(points, name=name)


@pytest.fixture
def no_config(tmp_path, monkeypatch):
    """Ensure no config files exist."""
    monkeypatch.setattr(config, "LOCAL_CONFIG_PATH", tmp_path / "nonexistent" / "elevation-profile.json")
    monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "nonexistent" / "global.json")


@pytest.fixture
def two_segment_gpx():
    """Two segments of three points each, with a gap between them."""
    return gpx_document(
        [
            [(37.7749, -122.4194, 10.0), (37.7758, -122.4183, 20.0), (37.7767, -122.4172, 15.0)],
            [(37.7800, -122.4100, 30.0), (37.7809, -122.4089, 25.0), (37.7818, -122.4078, 40.0)],
        ],
        name="Two Segments",
    )


@pytest.fixture
def km_track():
    """1 km track: up 100 m, then down 50 m."""
    return make_track([0.0, 250.0, 480.0, 530.0, 1000.0], [100.0, 150.0, 200.0, 180.0, 150.0], name="Climb")


@pytest.fixture
def short_track():
    return make_track([0.0, 200.0], [50.0, 60.0], name="Short")


@pytest.fixture
def hover_bus():
    return HoverBus()


@pytest.fixture
def map_surface(hover_bus):
    surface = RecordingSurface()
    hover_bus.subscribe("map", surface)
    return surface


@pytest.fixture
def controller(hover_bus, map_surface):
    return ProfileController("map", hover_bus)


@pytest.fixture
def track_factory():
    return make_track


@pytest.fixture
def gpx_factory():
    return gpx_document
