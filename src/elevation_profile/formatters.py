"""Formatting utilities for chart labels and stats."""

import math


def _round_half_up(value: float) -> int:
    """Round like a chart label would: halves go up, not to even."""
    return math.floor(value + 0.5)


def format_elevation(meters: float) -> str:
    """Format elevation as a compact axis label, e.g. '412m'."""
    return f"{_round_half_up(meters)}m"


def format_distance_km(meters: float, decimals: int = 1) -> str:
    """Format distance in kilometers as a compact axis label, e.g. '12.3km'."""
    return f"{meters / 1000:.{decimals}f}km"


def format_stats(total_distance: float, elevation_gain: float, min_elevation: float, max_elevation: float) -> dict[str, str]:
    """Format the summary line shown under the chart."""
    return {
        "distance": f"Distance: {total_distance / 1000:.2f} km",
        "elevation_gain": f"Elevation gain: {_round_half_up(elevation_gain)} m",
        "range": f"Range: {_round_half_up(min_elevation)}–{_round_half_up(max_elevation)} m",
    }
