"""
Thin wrapper around the MusicBrainz API for importing album track lists.

MusicBrainz allows one request per second per client and requires a
meaningful User-Agent. Configure it through USER_AGENT_* env vars.
"""

from __future__ import annotations

import logging
import time
import warnings
from dataclasses import dataclass, field
from os import getenv
from typing import Any

import requests
from urllib3.exceptions import InsecureRequestWarning

import music_manager.config  # noqa: F401 - load .env early
from music_manager.domain.models import Album, Artist, Track
from music_manager.transformers.albums import ms_to_seconds

logger = logging.getLogger(__name__)

BASE_URL = "https://musicbrainz.org/ws/2"

USER_AGENT_APP = getenv("USER_AGENT_APP", "music-manager")
USER_AGENT_VERSION = getenv("USER_AGENT_VERSION", "0.1.0")
USER_AGENT_CONTACT = getenv("USER_AGENT_CONTACT", "mailto:you@example.com")

HEADERS = {
    "User-Agent": f"{USER_AGENT_APP}/{USER_AGENT_VERSION} ({USER_AGENT_CONTACT})",
    "Accept": "application/json",
}

# MB_VERIFY_TLS=false only for local debugging behind intercepting proxies.
MB_VERIFY_TLS = getenv("MB_VERIFY_TLS", "true").lower() == "true"

if not MB_VERIFY_TLS:
    warnings.filterwarnings("ignore", category=InsecureRequestWarning)
    logger.warning(
        "MusicBrainz TLS verification is DISABLED (MB_VERIFY_TLS=false). "
        "Do not use this setting in production."
    )

_RATE_LIMIT_SECONDS = 1.0
_last_call_ts: float | None = None

# Track numbers across media: disc 2 track 3 becomes 203.
MEDIUM_TRACK_STRIDE = 100


class MusicBrainzError(Exception):
    """Non-2xx response from the MusicBrainz API."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"MusicBrainz API error: {status_code}")
        self.status_code = status_code
        self.body = body

    def user_message(self) -> str:
        if self.status_code == 400:
            return "Invalid search query. Please try different search terms."
        if self.status_code == 404:
            return "Album not found in MusicBrainz database."
        if self.status_code == 503:
            return (
                "MusicBrainz service is temporarily unavailable. "
                "Please try again later."
            )
        return "An error occurred while connecting to MusicBrainz."


def _sleep_if_needed() -> None:
    if _last_call_ts is None:
        return

    elapsed = time.time() - _last_call_ts
    if elapsed < _RATE_LIMIT_SECONDS:
        time.sleep(_RATE_LIMIT_SECONDS - elapsed)


def _get(path: str, params: dict[str, Any]) -> dict[str, Any]:
    global _last_call_ts

    _sleep_if_needed()
    url = f"{BASE_URL}{path}"

    response = requests.get(
        url,
        headers=HEADERS,
        params={**params, "fmt": "json"},
        timeout=10,
        verify=MB_VERIFY_TLS,
    )
    _last_call_ts = time.time()
    if not response.ok:
        raise MusicBrainzError(response.status_code, response.text)
    return response.json()


def build_search_query(artist: str, album: str) -> str:
    """Lucene query for a release-group search; blank parts are left out."""
    parts: list[str] = []
    if artist.strip():
        parts.append(f'artist:"{artist.strip()}"')
    if album.strip():
        parts.append(f'releasegroup:"{album.strip()}"')
    return " AND ".join(parts)


def search_release_groups(query: str, limit: int = 25) -> list[dict[str, Any]]:
    """Search MusicBrainz release-groups (albums) with a Lucene query."""
    data = _get("/release-group", {"query": query, "limit": limit})
    return list(data.get("release-groups", []))


def get_release(release_id: str) -> dict[str, Any]:
    """Lookup a release with recordings, artist credits, labels and release-group."""
    return _get(
        f"/release/{release_id}",
        {"inc": "recordings+artist-credits+labels+release-groups"},
    )


def _parse_position(raw: Any, fallback: int) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return fallback


def extract_tracks(release: dict[str, Any]) -> list[Track]:
    """Turn the media/track lists of a release into unrated Track records."""
    tracks: list[Track] = []

    for medium_index, medium in enumerate(release.get("media", [])):
        for track_index, raw in enumerate(medium.get("tracks", [])):
            position = _parse_position(raw.get("position"), track_index + 1)
            length = raw.get("length")
            recording = raw.get("recording") or {}

            tracks.append(
                Track(
                    duration_sec=ms_to_seconds(length) if length else None,
                    number=medium_index * MEDIUM_TRACK_STRIDE + position,
                    title=raw.get("title") or recording.get("title") or "",
                    mbid=recording.get("id") or raw.get("id"),
                )
            )

    missing = sum(1 for t in tracks if t.duration_sec is None)
    if missing:
        logger.warning("%d track(s) missing duration data", missing)

    return tracks


def _parse_year(date: str | None) -> int | None:
    if not date:
        return None
    try:
        return int(date[:4])
    except ValueError:
        return None


@dataclass(slots=True)
class ImportedRelease:
    """An unrated album plus the artists credited on the release."""

    album: Album
    artists: list[Artist] = field(default_factory=list)


def extract_artist_credits(release: dict[str, Any]) -> list[Artist]:
    """Credited artists of a release, keyed by their MusicBrainz id.

    Join-phrase-only entries and repeated credits are skipped.
    """
    artists: list[Artist] = []
    seen: set[str] = set()

    for credit in release.get("artist-credit", []):
        raw = credit.get("artist") or {}
        mbid = raw.get("id")
        if not mbid or mbid in seen:
            continue
        seen.add(mbid)
        artists.append(
            Artist(
                id=mbid,
                name=raw.get("name") or credit.get("name") or "",
                country=raw.get("country"),
                mbid=mbid,
            )
        )

    return artists


def fetch_release_album(release_id: str) -> ImportedRelease:
    """Fetch a release as an unrated Album with its tracks and credited artists.

    ``album.artist_ids`` holds the MusicBrainz ids of the credited artists;
    callers map them onto their own artist records.
    """
    release = get_release(release_id)
    tracks = extract_tracks(release)
    artists = extract_artist_credits(release)
    group = release.get("release-group") or {}

    logger.debug(
        "Fetched %d tracks and %d artists for release %s",
        len(tracks),
        len(artists),
        release_id,
    )

    album = Album(
        id=group.get("id") or release_id,
        title=release.get("title") or group.get("title") or "",
        year=_parse_year(release.get("date") or group.get("first-release-date")),
        primary_type=group.get("primary-type") or "Album",
        tracks=tracks,
        artist_ids=[a.id for a in artists],
        mbid=group.get("id"),
    )
    return ImportedRelease(album=album, artists=artists)

