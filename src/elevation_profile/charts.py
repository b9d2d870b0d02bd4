"""Static elevation profile chart generation."""

import io

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for server
import matplotlib.pyplot as plt

from elevation_profile.formatters import format_distance_km, format_elevation
from elevation_profile.models import Track

PROFILE_COLOR = '#ff0000'
FILL_COLOR = (1.0, 0.0, 0.0, 0.15)

MIN_ASPECT_RATIO = 0.5
MAX_ASPECT_RATIO = 4.0


def clamp_aspect_ratio(aspect_ratio: float) -> float:
    """Keep a requested width/height ratio within what the layout can draw."""
    return max(MIN_ASPECT_RATIO, min(MAX_ASPECT_RATIO, aspect_ratio))


def set_fixed_margins(fig, fig_width: float, fig_height: float) -> None:
    """Set fixed margins in inches so the plot area is predictable.

    Clients map pointer positions onto the plot area, so it must not move
    with tick label widths.
    """
    left_margin_in = 0.7
    right_margin_in = 0.3
    bottom_margin_in = 0.55
    top_margin_in = 0.35

    left = left_margin_in / fig_width
    right = 1 - right_margin_in / fig_width
    bottom = bottom_margin_in / fig_height
    top = 1 - top_margin_in / fig_height

    fig.subplots_adjust(left=left, right=right, bottom=bottom, top=top)


def generate_elevation_profile(
    track: Track,
    hover_index: int | None = None,
    aspect_ratio: float = 3.5,
) -> bytes:
    """Generate elevation profile image for a track.

    Args:
        track: Track to plot
        hover_index: Optional point to mark with a vertical line and dot
        aspect_ratio: Width/height ratio (1.0 = square, 3.5 = wide default)

    Returns PNG image as bytes.
    """
    distances_km = [p.distance / 1000 for p in track.points]
    elevations = [p.elevation for p in track.points]
    floor = track.min_elevation
    ceiling = track.min_elevation + track.elevation_range

    fig_height = 4
    fig_width = fig_height * aspect_ratio
    fig, ax = plt.subplots(figsize=(fig_width, fig_height), facecolor='white')

    ax.fill_between(distances_km, floor, elevations, color=FILL_COLOR, linewidth=0)
    ax.plot(distances_km, elevations, color=PROFILE_COLOR, linewidth=1.5)

    if hover_index is not None:
        pt = track.points[hover_index]
        ax.axvline(pt.distance / 1000, color='#333333', linewidth=0.8, alpha=0.7)
        ax.plot([pt.distance / 1000], [pt.elevation], 'o', color=PROFILE_COLOR, markersize=6)
        ax.annotate(
            f"{format_elevation(pt.elevation)} / {format_distance_km(pt.distance)}",
            xy=(pt.distance / 1000, pt.elevation),
            xytext=(0, 10), textcoords='offset points', ha='center', fontsize=9,
        )

    # A single point or zero-length track still gets a visible x-axis
    x_max = distances_km[-1] if distances_km[-1] > 0 else 1.0
    ax.set_xlim(0, x_max)
    ax.set_ylim(floor, ceiling)
    ax.set_xlabel('Distance (km)', fontsize=10)
    ax.set_ylabel('Elevation (m)', fontsize=10)
    ax.set_title(track.name, fontsize=11)

    ax.spines['top'].set_visible(False)
    ax.spines['right'].set_visible(False)
    ax.grid(axis='y', alpha=0.3, linestyle='-', linewidth=0.5)

    set_fixed_margins(fig, fig_width, fig_height)

    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=100, facecolor='white', edgecolor='none')
    plt.close(fig)
    buf.seek(0)
    return buf.getvalue()
