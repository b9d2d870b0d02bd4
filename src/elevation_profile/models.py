from dataclasses import dataclass, field


@dataclass(frozen=True)
class TrackPoint:
    longitude: float
    latitude: float
    elevation: float  # meters
    distance: float  # meters, cumulative from the first point of the track


@dataclass(frozen=True)
class Track:
    name: str
    points: tuple[TrackPoint, ...]
    total_distance: float  # meters
    elevation_gain: float  # meters
    min_elevation: float  # meters
    max_elevation: float  # meters
    source: str | None = None  # identifier the track was loaded from

    @property
    def elevation_range(self) -> float:
        """Elevation span for chart scaling, 1 for a flat track."""
        return (self.max_elevation - self.min_elevation) or 1


@dataclass(frozen=True)
class HoverLocation:
    """Payload of a hover broadcast to the map surface."""

    longitude: float
    latitude: float

    def to_dict(self) -> dict:
        return {"lon": self.longitude, "lat": self.latitude}


@dataclass
class InteractionState:
    selected_track_index: int = 0
    hover_index: int | None = None


@dataclass(frozen=True)
class ChartGeometry:
    """Normalized chart coordinate space.

    width x height is the elevation data area; label_band is the extra space
    below it that the axis labels sit on, so they never cover the profile.
    """

    width: float = 100.0
    height: float = 100.0
    label_band: float = 25.0

    @property
    def extended_height(self) -> float:
        return self.height + self.label_band

    @property
    def elevation_ratio(self) -> float:
        """Share of the rendered height occupied by the data area (0.8 by default)."""
        return self.height / self.extended_height


@dataclass(frozen=True)
class ChartBounds:
    """Horizontal extent of the rendered chart, in screen pixels."""

    left: float
    width: float


@dataclass
class HoverMarker:
    index: int
    left_percent: float  # hover line position across the chart
    top_percent: float  # dot position within the data area
    label_percent: float  # clamped so labels stay inside the chart
    elevation_label: str
    distance_label: str


@dataclass
class ProfileView:
    """Everything a rendering layer needs to draw the selected track."""

    track_names: list[str]
    selected_track_index: int
    view_box: tuple[float, float, float, float]
    elevation_ratio: float
    path_commands: list[tuple[str, float, float]]
    path_d: str
    area_d: str
    y_axis_max_label: str
    y_axis_min_label: str
    x_axis_end_label: str
    stats: dict[str, str] = field(default_factory=dict)
    hover: HoverMarker | None = None
