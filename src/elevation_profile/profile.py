"""Elevation profile geometry and pointer interaction.

The controller owns the interaction state for one rendered profile: which
track is selected and which point is under the pointer. Pointer and touch
handlers resolve a screen position to the nearest track point and broadcast
its coordinates to a map surface through a HoverBus. Rendering produces a
ProfileView in a normalized coordinate space (see ChartGeometry), so the
pixel layer only has to scale it.
"""

import logging
from collections.abc import Sequence
from enum import Enum

from elevation_profile.formatters import format_distance_km, format_elevation, format_stats
from elevation_profile.hover import HOVER_EVENT, HoverBus
from elevation_profile.loader import Fetcher, load_tracks
from elevation_profile.models import (
    ChartBounds,
    ChartGeometry,
    HoverLocation,
    HoverMarker,
    InteractionState,
    ProfileView,
    Track,
)

logger = logging.getLogger(__name__)

# Hover labels are ~40px wide; keep their anchor this far (in %) from either edge
LABEL_MIN_PERCENT = 2.0
LABEL_MAX_PERCENT = 98.0


class LoadState(Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"


def _fmt(value: float) -> str:
    """Format a path coordinate compactly ('50', '33.3333')."""
    return f"{value + 0.0:.4f}".rstrip("0").rstrip(".")


def project_point(track: Track, index: int, geometry: ChartGeometry) -> tuple[float, float]:
    """Map a track point to chart space; elevation grows upward (smaller y)."""
    pt = track.points[index]
    if track.total_distance > 0:
        x = pt.distance / track.total_distance * geometry.width
    else:
        x = 0.0
    y = geometry.height - (pt.elevation - track.min_elevation) / track.elevation_range * geometry.height
    return x, y


def build_path_commands(track: Track, geometry: ChartGeometry) -> list[tuple[str, float, float]]:
    """Move to the first point, then line to each following point."""
    commands = []
    for i in range(len(track.points)):
        x, y = project_point(track, i, geometry)
        commands.append(("M" if i == 0 else "L", x, y))
    return commands


def path_to_svg(commands: Sequence[tuple[str, float, float]]) -> str:
    return " ".join(f"{cmd} {_fmt(x)} {_fmt(y)}" for cmd, x, y in commands)


def area_path(path_d: str, geometry: ChartGeometry) -> str:
    """Close the profile line down to the bottom of the label band."""
    bottom = _fmt(geometry.extended_height)
    return f"{path_d} L {_fmt(geometry.width)} {bottom} L 0 {bottom} Z"


def relative_x(client_x: float, bounds: ChartBounds) -> float | None:
    """Pointer position as a fraction of the chart width, None for a collapsed chart."""
    if bounds.width <= 0:
        return None
    return (client_x - bounds.left) / bounds.width


def resolve_hover_index(track: Track, rel_x: float | None) -> int | None:
    """Index of the point nearest to rel_x along the track.

    Returns None when rel_x is outside [0, 1]. Ties go to the earliest point.
    """
    if rel_x is None or not 0 <= rel_x <= 1:
        return None

    target_distance = rel_x * track.total_distance
    closest = 0
    min_diff = float("inf")
    for i, pt in enumerate(track.points):
        diff = abs(pt.distance - target_distance)
        if diff < min_diff:
            min_diff = diff
            closest = i
    return closest


def build_hover_marker(track: Track, index: int) -> HoverMarker:
    pt = track.points[index]
    left = pt.distance / track.total_distance * 100 if track.total_distance > 0 else 0.0
    top = (1 - (pt.elevation - track.min_elevation) / track.elevation_range) * 100
    return HoverMarker(
        index=index,
        left_percent=left,
        top_percent=top,
        label_percent=max(LABEL_MIN_PERCENT, min(LABEL_MAX_PERCENT, left)),
        elevation_label=format_elevation(pt.elevation),
        distance_label=format_distance_km(pt.distance),
    )


class ProfileController:
    """Interaction state machine for one elevation profile.

    UNLOADED -> LOADING -> LOADED(tracks). Once loaded the controller is idle
    (no hover) or hovering a point of the selected track. Handlers run to
    completion one at a time; a load that is superseded by a newer load is
    discarded when it finishes.
    """

    def __init__(
        self,
        map_target: str,
        hover_bus: HoverBus,
        geometry: ChartGeometry | None = None,
        fetch: Fetcher | None = None,
        fetch_timeout: float | None = None,
    ):
        self.map_target = map_target
        self.hover_bus = hover_bus
        self.geometry = geometry or ChartGeometry()
        self.fetch = fetch
        self.fetch_timeout = fetch_timeout
        self.state = LoadState.UNLOADED
        self.tracks: list[Track] = []
        self.interaction = InteractionState()
        self.sources: tuple[str, ...] = ()
        self._generation = 0

    # Loading

    async def load(self, sources: Sequence[str]) -> bool:
        """Load tracks for sources; returns False if a newer load superseded this one."""
        self._generation += 1
        generation = self._generation
        self.sources = tuple(sources)
        self._set_hover(None)
        self.state = LoadState.LOADING

        tracks = await load_tracks(self.sources, fetch=self.fetch, timeout=self.fetch_timeout)

        if generation != self._generation:
            logger.debug("Discarding stale load of %d sources", len(sources))
            return False
        self.set_tracks(tracks)
        return True

    def set_tracks(self, tracks: Sequence[Track]) -> None:
        """Enter LOADED with an already loaded collection."""
        self._set_hover(None)
        self.tracks = list(tracks)
        self.interaction.selected_track_index = 0
        self.state = LoadState.LOADED

    @property
    def selected_track(self) -> Track | None:
        if self.state is not LoadState.LOADED or not self.tracks:
            return None
        return self.tracks[self.interaction.selected_track_index]

    def select_track(self, index: int) -> None:
        """Switch the displayed track; any hover on the old track is cleared.

        Raises:
            IndexError: If no track exists at index.
        """
        if not 0 <= index < len(self.tracks):
            raise IndexError(f"Track index {index} out of range (0-{len(self.tracks) - 1})")
        if index == self.interaction.selected_track_index:
            return
        self._set_hover(None)
        self.interaction.selected_track_index = index

    # Pointer and touch handlers

    def hover_at(self, rel_x: float | None) -> int | None:
        """Hover the point nearest to a relative chart position."""
        track = self.selected_track
        if track is None:
            return None
        self._set_hover(resolve_hover_index(track, rel_x))
        return self.interaction.hover_index

    def pointer_move(self, client_x: float, bounds: ChartBounds) -> None:
        self.hover_at(relative_x(client_x, bounds))

    def pointer_leave(self) -> None:
        self._set_hover(None)

    def touch_start(self, touches: Sequence[float], bounds: ChartBounds) -> None:
        """Scrub with a single finger; more than one touch is ambiguous and clears."""
        if len(touches) == 1:
            self.hover_at(relative_x(touches[0], bounds))
        else:
            self._set_hover(None)

    def touch_move(self, touches: Sequence[float], bounds: ChartBounds) -> None:
        self.touch_start(touches, bounds)

    def touch_end(self) -> None:
        self._set_hover(None)

    def _set_hover(self, index: int | None) -> None:
        if index == self.interaction.hover_index:
            return
        self.interaction.hover_index = index
        self.hover_bus.dispatch(self.map_target, HOVER_EVENT, self.hover_location())

    def hover_location(self) -> HoverLocation | None:
        track = self.selected_track
        index = self.interaction.hover_index
        if track is None or index is None:
            return None
        pt = track.points[index]
        return HoverLocation(longitude=pt.longitude, latitude=pt.latitude)

    # Rendering

    def render(self) -> ProfileView | None:
        """View model for the selected track, None until there is one to draw."""
        track = self.selected_track
        if track is None:
            return None

        geometry = self.geometry
        commands = build_path_commands(track, geometry)
        path_d = path_to_svg(commands)
        hover = None
        if self.interaction.hover_index is not None:
            hover = build_hover_marker(track, self.interaction.hover_index)

        return ProfileView(
            track_names=[t.name for t in self.tracks],
            selected_track_index=self.interaction.selected_track_index,
            view_box=(0.0, 0.0, geometry.width, geometry.extended_height),
            elevation_ratio=geometry.elevation_ratio,
            path_commands=commands,
            path_d=path_d,
            area_d=area_path(path_d, geometry),
            y_axis_max_label=format_elevation(track.max_elevation),
            y_axis_min_label=format_elevation(track.min_elevation),
            x_axis_end_label=format_distance_km(track.total_distance),
            stats=format_stats(track.total_distance, track.elevation_gain, track.min_elevation, track.max_elevation),
            hover=hover,
        )
