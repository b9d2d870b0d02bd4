"""Web interface serving elevation profile data and charts."""

import logging
import time
from collections import OrderedDict
from dataclasses import asdict
from threading import Lock

from flask import Flask, Response, jsonify, request

from elevation_profile import __version_date__, get_git_hash
from elevation_profile.charts import clamp_aspect_ratio, generate_elevation_profile
from elevation_profile.config import chart_geometry_from_config, get_setting, load_config
from elevation_profile.hover import HoverBus, RecordingSurface
from elevation_profile.loader import is_url, load_tracks_sync
from elevation_profile.models import Track
from elevation_profile.profile import ProfileController

logger = logging.getLogger(__name__)

MAX_SOURCES = 20


class TrackCache:
    """Thread-safe LRU cache of loaded track collections keyed by source list."""

    def __init__(self, max_size: int = 50, ttl_seconds: float = 300):
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self.cache: OrderedDict[tuple[str, ...], tuple[list[Track], float]] = OrderedDict()
        self.lock = Lock()
        self.hits = 0
        self.misses = 0

    def get(self, sources: tuple[str, ...]) -> list[Track] | None:
        """Get cached tracks, None if missing or expired."""
        with self.lock:
            entry = self.cache.get(sources)
            if entry is not None and time.time() - entry[1] < self.ttl_seconds:
                self.cache.move_to_end(sources)
                self.hits += 1
                return entry[0]
            self.misses += 1
            return None

    def set(self, sources: tuple[str, ...], tracks: list[Track]) -> None:
        with self.lock:
            if sources in self.cache:
                self.cache.move_to_end(sources)
            self.cache[sources] = (tracks, time.time())
            while len(self.cache) > self.max_size:
                self.cache.popitem(last=False)

    def stats(self) -> dict:
        with self.lock:
            return {"hits": self.hits, "misses": self.misses, "size": len(self.cache), "max_size": self.max_size}

    def clear(self) -> None:
        with self.lock:
            self.cache.clear()
            self.hits = 0
            self.misses = 0


app = Flask(__name__)
_track_cache = TrackCache()


def _get_tracks(sources: tuple[str, ...]) -> list[Track]:
    tracks = _track_cache.get(sources)
    if tracks is None:
        tracks = load_tracks_sync(sources)
        # Partial failures are not cached so a flaky source gets retried
        if len(tracks) == len(sources):
            _track_cache.set(sources, tracks)
        else:
            logger.info("Loaded %d of %d sources, not caching", len(tracks), len(sources))
    return tracks


def _track_summary(track: Track) -> dict:
    return {
        "name": track.name,
        "source": track.source,
        "points": len(track.points),
        "total_distance": track.total_distance,
        "elevation_gain": track.elevation_gain,
        "min_elevation": track.min_elevation,
        "max_elevation": track.max_elevation,
    }


def _parse_sources() -> tuple[tuple[str, ...] | None, tuple[dict, int] | None]:
    sources = tuple(s for s in request.args.getlist("src") if s.strip())
    if not sources:
        return None, ({"error": "At least one src parameter is required"}, 400)
    if len(sources) > MAX_SOURCES:
        return None, ({"error": f"At most {MAX_SOURCES} sources are supported"}, 400)
    if not all(is_url(s) for s in sources):
        return None, ({"error": "Only http(s) sources are supported"}, 400)
    return sources, None


@app.route("/version")
def version():
    return {"version_date": __version_date__, "git_hash": get_git_hash()}


@app.route("/profile-data")
def profile_data():
    """Return the rendered profile view for the requested tracks as JSON."""
    sources, error = _parse_sources()
    if error:
        body, status = error
        return jsonify(body), status

    try:
        track_index = int(request.args.get("track", 0))
        rel_x = request.args.get("x")
        rel_x = float(rel_x) if rel_x is not None else None
    except ValueError:
        return jsonify({"error": "Invalid track or x parameter"}), 400

    tracks = _get_tracks(sources)
    if not tracks:
        return jsonify({"error": "No tracks could be loaded"}), 404

    config = load_config()
    map_target = request.args.get("map", get_setting("map_target", config))
    bus = HoverBus()
    surface = RecordingSurface()
    bus.subscribe(map_target, surface)

    controller = ProfileController(map_target, bus, geometry=chart_geometry_from_config(config))
    controller.set_tracks(tracks)
    try:
        controller.select_track(track_index)
    except IndexError as e:
        return jsonify({"error": str(e)}), 400
    if rel_x is not None:
        controller.hover_at(rel_x)

    hover_location = surface.last
    return jsonify({
        "tracks": [_track_summary(t) for t in tracks],
        "requested": len(sources),
        "view": asdict(controller.render()),
        "map_target": map_target,
        "hover_location": hover_location.to_dict() if hover_location else None,
    })


@app.route("/elevation-profile")
def elevation_profile():
    """Return a PNG chart of one track, optionally marking a hovered point."""
    sources, error = _parse_sources()
    if error:
        body, status = error
        return jsonify(body), status

    try:
        track_index = int(request.args.get("track", 0))
        hover = request.args.get("hover")
        hover_index = int(hover) if hover is not None else None
        aspect = clamp_aspect_ratio(float(request.args.get("aspect", 3.5)))
    except ValueError:
        return jsonify({"error": "Invalid track, hover or aspect parameter"}), 400

    tracks = _get_tracks(sources)
    if not tracks:
        return jsonify({"error": "No tracks could be loaded"}), 404
    if not 0 <= track_index < len(tracks):
        return jsonify({"error": f"Track index {track_index} out of range"}), 400
    track = tracks[track_index]
    if hover_index is not None and not 0 <= hover_index < len(track.points):
        return jsonify({"error": f"Hover index {hover_index} out of range"}), 400

    img_bytes = generate_elevation_profile(track, hover_index=hover_index, aspect_ratio=aspect)
    return Response(img_bytes, mimetype="image/png")


@app.route("/cache-stats")
def cache_stats():
    return _track_cache.stats()


@app.route("/cache-clear", methods=["GET", "POST"])
def cache_clear():
    size = _track_cache.stats()["size"]
    _track_cache.clear()
    return {"status": "ok", "message": f"Track cache cleared ({size})"}


def main():
    """Run the web server."""
    import os
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    port = int(os.environ.get("PORT", 5050))
    print("Starting Elevation Profile web server...")
    print(f"Open http://localhost:{port}/profile-data?src=<gpx-url> in your browser")
    app.run(host="0.0.0.0", port=port, debug=False)


if __name__ == "__main__":
    main()
