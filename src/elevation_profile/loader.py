"""Best-effort loading of many track sources into a TrackCollection."""

import asyncio
import functools
import inspect
import logging
import re
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

import requests

from elevation_profile.analyzer import aggregate_track
from elevation_profile.config import DEFAULTS, get_setting, load_config
from elevation_profile.models import Track
from elevation_profile.parser import build_track_points, iter_segments, parse_gpx_document, parse_gpx_name

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

Fetcher = Callable[[str], "bytes | str | Awaitable[bytes | str]"]


def is_url(source: str) -> bool:
    """Check if the source identifier is an http(s) URL."""
    return bool(URL_PATTERN.match(source))


def fetch_source(source: str, timeout: float | None = None, user_agent: str | None = None) -> bytes:
    """Fetch raw track document bytes for a URL or local path.

    Raises:
        requests.RequestException: If the download fails.
        OSError: If the local file cannot be read.
    """
    if is_url(source):
        headers = {"User-Agent": user_agent or DEFAULTS["user_agent"]}
        response = requests.get(source, headers=headers, timeout=timeout)
        response.raise_for_status()
        return response.content
    return Path(source).read_bytes()


def track_from_document(data: bytes | str, position: int = 0, source: str | None = None) -> Track | None:
    """Parse and aggregate one document; None when it holds no points."""
    gpx = parse_gpx_document(data)
    points = build_track_points(iter_segments(gpx))
    if not points:
        return None
    return aggregate_track(points, name=parse_gpx_name(gpx), position=position, source=source)


async def _fetch(fetch: Fetcher, source: str, timeout: float | None):
    async def run():
        if inspect.iscoroutinefunction(fetch):
            result = fetch(source)
        else:
            result = await asyncio.to_thread(fetch, source)
        # Plain callables may hand back a coroutine from an async client
        if inspect.isawaitable(result):
            result = await result
        return result

    if timeout is None:
        return await run()
    return await asyncio.wait_for(run(), timeout)


async def load_tracks(
    sources: Sequence[str],
    fetch: Fetcher | None = None,
    timeout: float | None = None,
    user_agent: str | None = None,
) -> list[Track]:
    """Fetch, parse and aggregate each source in order.

    A source that fails to fetch or parse, or that holds no points, is logged
    and left out; the rest of the batch still loads.

    Args:
        sources: Track identifiers (URLs or local paths), in display order
        fetch: Callable returning raw document bytes for a source, sync or async.
            Defaults to fetch_source, which is given the timeout and user agent.
        timeout: Optional per-source fetch timeout in seconds
        user_agent: User-Agent header for the default fetcher

    Returns:
        Tracks for the sources that loaded, in request order.
    """
    if fetch is None:
        fetch = functools.partial(fetch_source, timeout=timeout, user_agent=user_agent)

    tracks: list[Track] = []
    for position, source in enumerate(sources):
        try:
            data = await _fetch(fetch, source, timeout)
            track = track_from_document(data, position=position, source=source)
        except Exception as e:
            logger.warning("Error loading track %s: %s", source, e)
            continue
        if track is None:
            logger.info("Skipping %s: no track points", source)
            continue
        tracks.append(track)

    logger.debug("Loaded %d of %d track sources", len(tracks), len(sources))
    return tracks


def load_tracks_sync(
    sources: Sequence[str],
    fetch: Fetcher | None = None,
    config: dict | None = None,
) -> list[Track]:
    """Run load_tracks to completion for synchronous callers."""
    if config is None:
        config = load_config()
    return asyncio.run(load_tracks(
        sources,
        fetch=fetch,
        timeout=get_setting("fetch_timeout", config),
        user_agent=get_setting("user_agent", config),
    ))
